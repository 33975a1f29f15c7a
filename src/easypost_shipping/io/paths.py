from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple


def derive_run_paths(request_file: Path, save_dir: Optional[Path] = None) -> Tuple[Path, Path]:
    """
    Given a shipment request file, return (label_dir, log_path).

    The label directory is `save_dir` when given, else the request's own
    directory; the log sits next to the request with a `.log` suffix.
    Raises FileNotFoundError if request_file doesn't exist.
    """
    p = Path(request_file)
    if not p.is_file():
        raise FileNotFoundError(p)

    label_dir = Path(save_dir) if save_dir is not None else p.parent
    return label_dir, p.with_suffix(".log")
