from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union
import logging

from ..errors import MalformedResponse
from .rate import Rate

if TYPE_CHECKING:
    from ..api.requester import ShippingRequester

LABEL_FILENAME_PREFIX = "EASYPOST_LABEL_"

logger = logging.getLogger("easypost_shipping.models.label")


def label_filename(label_id: str, filetype: str) -> str:
    """EASYPOST_LABEL_<id>.<extension>, the extension being what follows the first '/'."""
    extension = filetype.split("/", 1)[1] if "/" in filetype else filetype
    return f"{LABEL_FILENAME_PREFIX}{label_id}.{extension}"


@dataclass(frozen=True)
class Label:
    """A purchased, printable shipping label."""
    id: str
    tracking_code: Optional[str]
    url: str
    filetype: str
    filename: str
    rate: Rate

    @classmethod
    def from_purchase(cls, response: Mapping[str, Any]) -> "Label":
        """Build from the body returned by POST /shipments/<id>/buy."""
        try:
            postage = response["postage_label"]
            label_id = postage["id"]
            filetype = postage["label_file_type"]
            return cls(
                id=label_id,
                tracking_code=response.get("tracking_code"),
                url=postage["label_url"],
                filetype=filetype,
                filename=label_filename(label_id, filetype),
                rate=Rate.from_response(response["selected_rate"]),
            )
        except (KeyError, TypeError) as ex:
            raise MalformedResponse(
                f"Purchase response is missing label data: {ex}") from ex

    def save(self, requester: "ShippingRequester", directory: Union[str, Path] = ".") -> Path:
        """Download the label file into `directory` and return its path.

        Path separators in `filename` (from file types like "application/vnd/zpl")
        become "_" so the file always lands directly in `directory`.
        """
        out = Path(directory) / self.filename.replace("/", "_").replace("\\", "_")
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(requester.get_bytes(self.url))
        logger.info("Saved label %s to %s", self.id, out)
        return out
