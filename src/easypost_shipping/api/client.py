# src/easypost_shipping/api/client.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple
import json

from ..errors import RequesterError


@dataclass
class ReplayRequester:
    """Requester that serves canned responses from a single JSON file.

    The file holds one JSON object whose keys are "<METHOD> <path>" (for
    example "POST /shipments" or "GET https://host/label.pdf"). A value is
    either one response or a list of responses served in order; once a list
    is exhausted its last entry keeps being served. Every call is appended
    to `calls` as (method, path, body).
    """

    replay_file: Path
    calls: List[Tuple[str, str, Dict[str, Any]]] = field(default_factory=list)
    _responses: Dict[str, List[Any]] = field(default_factory=dict, repr=False)
    _served: Dict[str, int] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.replay_file = Path(self.replay_file)
        if not self.replay_file.is_file():
            raise ValueError(f"Replay file does not exist: {self.replay_file}")

        raw = json.loads(self.replay_file.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(
                "Replay file must hold a JSON object keyed by '<METHOD> <path>'.")

        for key, value in raw.items():
            method, _, path = key.partition(" ")
            self._responses[f"{method.upper()} {path.strip()}"] = (
                value if isinstance(value, list) else [value])

    def _next(self, method: str, path: str) -> Any:
        key = f"{method} {path}"
        queue = self._responses.get(key)
        if not queue:
            raise RequesterError(f"No replay response for {key}", status=404)
        i = self._served.get(key, 0)
        self._served[key] = i + 1
        return queue[min(i, len(queue) - 1)]

    def post(self, path: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("POST", path, dict(body)))
        payload = self._next("POST", path)
        if not isinstance(payload, dict):
            raise RequesterError(f"Replay response for POST {path} is not an object")
        return payload

    def get_bytes(self, url: str) -> bytes:
        self.calls.append(("GET", url, {}))
        payload = self._next("GET", url)
        if isinstance(payload, str):
            return payload.encode("utf-8")
        return json.dumps(payload).encode("utf-8")
