# src/easypost_shipping/models/shipment.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Sequence, Tuple
import logging

from ..errors import (
    ConstructionFailed,
    InvalidArgument,
    MalformedResponse,
    PurchaseFailed,
    RequesterError,
    SelectionFailed,
)
from .address import Address
from .customs import CustomsInfo
from .label import Label
from .parcel import Parcel
from .rate import Rate
from .resource import require_persisted
from .scan_form import ScanForm

if TYPE_CHECKING:
    from ..api.requester import ShippingRequester

LOWEST = "lowest"

_REFERENCE_FIELDS = ("to_address", "from_address", "parcel", "customs_info")


class Shipment:
    """A shipment persisted on the remote service, with the rates it was offered.

    Use Shipment.create(); it validates the referenced resources, performs
    the create call and only then returns an instance, so every Shipment a
    caller holds has an id and a (possibly empty) tuple of rates.

    `from_address` and `to_address` are fixed after creation. `parcel`,
    `customs_info`, `scan_form` and `options` stay assignable.
    """

    role = "shipment"
    operation = "/shipments"

    def __init__(
        self,
        requester: "ShippingRequester",
        *,
        id: str,
        from_address: Address,
        to_address: Address,
        parcel: Parcel,
        customs_info: Optional[CustomsInfo] = None,
        scan_form: Optional[ScanForm] = None,
        rates: Sequence[Rate] = (),
        options: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.requester = requester
        self.id = id
        self._from_address = from_address
        self._to_address = to_address
        self.parcel = parcel
        self.customs_info = customs_info
        self.scan_form = scan_form
        self._rates: Tuple[Rate, ...] = tuple(rates)
        self.options = dict(options) if options is not None else None
        self.logger = logger or logging.getLogger(
            "easypost_shipping.models.shipment")

    @property
    def from_address(self) -> Address:
        return self._from_address

    @property
    def to_address(self) -> Address:
        return self._to_address

    @property
    def rates(self) -> Tuple[Rate, ...]:
        return self._rates

    # --- creation ---------------------------------------------------------

    @staticmethod
    def _validate(fields: Mapping[str, Any]) -> None:
        require_persisted(fields["from_address"], Address, "from_address")
        require_persisted(fields["to_address"], Address, "to_address")
        require_persisted(fields["parcel"], Parcel, "parcel")
        if fields.get("customs_info") is not None:
            require_persisted(fields["customs_info"], CustomsInfo, "customs_info")
        if fields.get("scan_form") is not None and not isinstance(fields["scan_form"], ScanForm):
            raise InvalidArgument(
                f"scan_form must be a ScanForm, got {type(fields['scan_form']).__name__}")

        options = fields.get("options")
        if options is not None:
            if not isinstance(options, Mapping):
                raise InvalidArgument("options must be a mapping of strings")
            bad = [k for k, v in options.items()
                   if not isinstance(k, str) or not isinstance(v, str)]
            if bad:
                raise InvalidArgument(
                    f"options must map strings to strings; offending keys: {bad}")

    @classmethod
    def create(
        cls,
        requester: "ShippingRequester",
        *,
        from_address: Address,
        to_address: Address,
        parcel: Parcel,
        customs_info: Optional[CustomsInfo] = None,
        scan_form: Optional[ScanForm] = None,
        options: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "Shipment":
        """Create the shipment remotely and return it with its id and rates.

        Raises InvalidArgument before any network call when a referenced
        resource is missing or has no id, and ConstructionFailed when the
        create call fails or its response cannot be read.
        """
        fields: Dict[str, Any] = {
            "from_address": from_address,
            "to_address": to_address,
            "parcel": parcel,
            "customs_info": customs_info,
            "scan_form": scan_form,
            "options": options,
        }
        cls._validate(fields)

        payload = serialize_fields(cls.role, fields)
        log = logger or logging.getLogger("easypost_shipping.models.shipment")
        log.debug("Creating shipment with %d field(s)", len(payload))

        try:
            resp = requester.post(cls.operation, payload)
        except RequesterError as ex:
            raise ConstructionFailed(f"Could not create shipment: {ex}") from ex

        shipment_id = resp.get("id")
        if not shipment_id:
            raise ConstructionFailed("Shipment response carried no id")

        raw_rates = resp.get("rates")
        if raw_rates is None:
            raw_rates = []
        if not isinstance(raw_rates, list):
            raise ConstructionFailed(
                f"Shipment {shipment_id} response has non-list rates: {type(raw_rates).__name__}")

        try:
            rates = [
                Rate(
                    id=r["id"],
                    carrier=r.get("carrier"),
                    service=r.get("service"),
                    rate=r.get("rate"),
                    shipment_id=shipment_id,
                )
                for r in raw_rates
            ]
        except (KeyError, TypeError, AttributeError, MalformedResponse) as ex:
            raise ConstructionFailed(
                f"Shipment {shipment_id} response has an unreadable rate: {ex}") from ex

        log.info("Created shipment %s with %d rate(s)", shipment_id, len(rates))
        return cls(requester, id=shipment_id, rates=rates, logger=logger, **fields)

    # --- serialization ----------------------------------------------------

    def serialize(self) -> Dict[str, str]:
        return serialize_fields(self.role, {
            "to_address": self.to_address,
            "from_address": self.from_address,
            "parcel": self.parcel,
            "customs_info": self.customs_info,
            "options": self.options,
        })

    def clone(self) -> "Shipment":
        """Create a new remote shipment from this one's fields.

        This is a second create call; the result has its own id and rates.
        """
        fields: Dict[str, Any] = {
            "from_address": self.from_address,
            "to_address": self.to_address,
            "parcel": self.parcel,
        }
        if self.customs_info is not None:
            fields["customs_info"] = self.customs_info
        if self.scan_form is not None:
            fields["scan_form"] = self.scan_form
        if self.options is not None:
            fields["options"] = dict(self.options)
        self.logger.debug("Cloning shipment %s", self.id)
        return type(self).create(self.requester, logger=self.logger, **fields)

    # --- purchase ---------------------------------------------------------

    def select_rate(self, *, rate: Optional[str] = None, service_type: Optional[str] = None) -> Rate:
        """Pick one held rate: the cheapest for rate="lowest", else the first
        whose service equals `service_type`."""
        if rate == LOWEST:
            selected = min(self.rates, key=lambda r: r.rate, default=None)
            wanted = "rate 'lowest'"
        elif service_type is not None:
            selected = next(
                (r for r in self.rates if r.service == service_type), None)
            wanted = f"service '{service_type}'"
        else:
            raise InvalidArgument(
                "missing rate or service selector: pass rate='lowest' or service_type=<name>")

        if selected is None:
            raise SelectionFailed(
                f"Invalid {wanted} selected for shipment {self.id}\n"
                + format_available_rates(self.rates),
                [(r.service, r.rate) for r in self.rates],
            )
        return selected

    def buy(self, *, rate: Optional[str] = None, service_type: Optional[str] = None) -> Label:
        """Buy a rate and return the resulting Label.

        The Shipment itself, including `rates`, is left as it was.
        """
        selected = self.select_rate(rate=rate, service_type=service_type)
        path = f"{self.operation}/{self.id}/buy"
        self.logger.info(
            "Buying %s %s (%s) for shipment %s",
            selected.carrier, selected.service, selected.rate, self.id)

        try:
            resp = self.requester.post(path, selected.serialize())
        except RequesterError as ex:
            raise PurchaseFailed(
                f"Purchase of rate {selected.id} for shipment {self.id} failed: {ex}") from ex

        try:
            label = Label.from_purchase(resp)
        except MalformedResponse as ex:
            raise PurchaseFailed(
                f"Purchase of rate {selected.id} for shipment {self.id} returned no usable label: {ex}"
            ) from ex

        self.logger.info(
            "Bought label %s tracking_code=%s", label.id, label.tracking_code)
        return label

    def __repr__(self) -> str:
        return f"Shipment(id={self.id!r}, rates={len(self.rates)})"


def serialize_fields(role: str, fields: Mapping[str, Any]) -> Dict[str, str]:
    """Flat form payload: `role[field][id]` per referenced resource, `role[options][key]` per option."""
    out: Dict[str, str] = {}
    options = fields.get("options")
    if options is not None:
        for key, value in options.items():
            out[f"{role}[options][{key}]"] = value
    for name in _REFERENCE_FIELDS:
        value = fields.get(name)
        if value is not None:
            out[f"{role}[{name}][id]"] = value.id
    return out


def format_available_rates(rates: Sequence[Rate]) -> str:
    lines = ["Allowed services and rates for this shipment are:"]
    for r in rates:
        lines.append(f"\t{r.service or '':<15}: {r.rate:4.2f}")
    return "\n".join(lines) + "\n"
