# src/easypost_shipping/errors.py
from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple


class EasyPostError(RuntimeError):
    """Base class for every error raised by this package."""


class RequesterError(EasyPostError):
    """Raised when an HTTP call to the service fails.

    `status` is the HTTP status code when one was received (None for
    connection-level failures); `body` is the raw response text, if any.
    """

    def __init__(self, message: str, *, status: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class MalformedResponse(EasyPostError):
    """Raised when a decoded response lacks a field we need."""


class ConstructionFailed(EasyPostError):
    """Raised when a resource could not be created remotely."""


class InvalidArgument(EasyPostError, ValueError):
    """Raised for bad caller input, always before any network call."""


class SelectionFailed(EasyPostError):
    """Raised by Shipment.buy when no held rate matches the selector.

    `available` holds the (service, rate) pairs the caller could pick from.
    """

    def __init__(self, message: str, available: Sequence[Tuple[str, Any]] = ()) -> None:
        super().__init__(message)
        self.available = tuple(available)


class PurchaseFailed(EasyPostError):
    """Raised when the purchase request for a selected rate fails."""


__all__ = [
    "EasyPostError",
    "RequesterError",
    "MalformedResponse",
    "ConstructionFailed",
    "InvalidArgument",
    "SelectionFailed",
    "PurchaseFailed",
]
