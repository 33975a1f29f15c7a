from .env_cfg import EnvCfg
from .resource import Resource
from .address import Address
from .parcel import Parcel
from .customs import CustomsInfo, CustomsItem
from .scan_form import ScanForm
from .rate import Rate
from .label import Label
from .shipment import Shipment

__all__ = [
    "EnvCfg",
    "Resource",
    "Address",
    "Parcel",
    "CustomsInfo",
    "CustomsItem",
    "ScanForm",
    "Rate",
    "Label",
    "Shipment",
]
