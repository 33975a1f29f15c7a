from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class ScanForm:
    """Reference to a USPS scan form; built from responses, never created here."""
    id: str
    form_url: Optional[str] = None
    form_file_type: Optional[str] = None
    tracking_codes: Tuple[str, ...] = ()

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "ScanForm":
        return cls(
            id=data["id"],
            form_url=data.get("form_url"),
            form_file_type=data.get("form_file_type"),
            tracking_codes=tuple(data.get("tracking_codes") or ()),
        )
