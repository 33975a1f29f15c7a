from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from ..errors import MalformedResponse


def parse_price(value: Any) -> Decimal:
    """Exact decimal price from a wire value ("5.00", 5, "12.3")."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise MalformedResponse(f"Invalid rate value: {value!r}")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation as ex:
        raise MalformedResponse(f"Invalid rate value: {value!r}") from ex
    if not price.is_finite():
        raise MalformedResponse(f"Invalid rate value: {value!r}")
    return price


@dataclass(frozen=True)
class Rate:
    """One carrier/service/price offer for a shipment."""
    id: str
    carrier: str
    service: str
    rate: Decimal
    shipment_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", parse_price(self.rate))

    @classmethod
    def from_response(cls, data: Mapping[str, Any], shipment_id: Optional[str] = None) -> "Rate":
        """Build from a response rate object; `shipment_id` wins over the payload's own."""
        try:
            return cls(
                id=data["id"],
                carrier=data.get("carrier"),
                service=data.get("service"),
                rate=data.get("rate"),
                shipment_id=shipment_id or data.get("shipment_id"),
            )
        except (KeyError, TypeError, AttributeError) as ex:
            raise MalformedResponse(f"Invalid rate object: {data!r}") from ex

    def serialize(self) -> Dict[str, str]:
        return {"rate[id]": self.id}
