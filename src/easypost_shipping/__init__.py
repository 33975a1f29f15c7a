# src/easypost_shipping/__init__.py
from .models import (
    Address,
    CustomsInfo,
    CustomsItem,
    Label,
    Parcel,
    Rate,
    ScanForm,
    Shipment,
)
from .api.requester import Requester

__all__ = [
    "Address",
    "CustomsInfo",
    "CustomsItem",
    "Label",
    "Parcel",
    "Rate",
    "ScanForm",
    "Shipment",
    "Requester",
]
