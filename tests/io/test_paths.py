from pathlib import Path
import pytest
from easypost_shipping.io.paths import derive_run_paths


def test_derive_run_paths_defaults_to_request_dir(tmp_path: Path):
    src = tmp_path / "order_1042.json"
    src.write_text("{}")

    label_dir, log = derive_run_paths(src)
    assert label_dir == tmp_path
    assert log == tmp_path / "order_1042.log"


def test_derive_run_paths_uses_save_dir(tmp_path: Path):
    src = tmp_path / "order.json"
    src.write_text("{}")

    label_dir, _ = derive_run_paths(src, tmp_path / "labels")
    assert label_dir == tmp_path / "labels"


def test_derive_run_paths_missing_request_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        derive_run_paths(tmp_path / "missing.json")
