# src/easypost_shipping/models/resource.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional, Tuple, Type, TypeVar
import logging

from ..errors import ConstructionFailed, InvalidArgument, RequesterError

if TYPE_CHECKING:
    from ..api.requester import ShippingRequester

logger = logging.getLogger("easypost_shipping.models.resource")

R = TypeVar("R", bound="Resource")


class Resource:
    """A domain object backed by a remote collection with a server-assigned id.

    Subclasses declare:
      - role:       prefix of every serialized key, e.g. "address"
      - operation:  collection endpoint, e.g. "/addresses"
      - fieldnames: ordered attribute names taking part in serialize()

    Attributes listed in `fieldnames` are accepted as keyword arguments and
    default to None. Nested resources are serialized by reference
    (`role[field][id]`), lists of resources by index
    (`role[field][0][id]`); fields holding None are left out.
    """

    role: ClassVar[str] = ""
    operation: ClassVar[str] = ""
    fieldnames: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, id: Optional[str] = None, **fields: Any) -> None:
        unknown = sorted(set(fields) - set(self.fieldnames))
        if unknown:
            raise InvalidArgument(
                f"{type(self).__name__} got unexpected field(s): {', '.join(unknown)}")
        self.id = id
        for name in self.fieldnames:
            setattr(self, name, fields.get(name))

    def serialize(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for name in self.fieldnames:
            value = getattr(self, name)
            if value is None:
                continue
            key = f"{self.role}[{name}]"
            if isinstance(value, Resource):
                out[f"{key}[id]"] = value.id
            elif isinstance(value, (list, tuple)):
                for i, item in enumerate(value):
                    if isinstance(item, Resource):
                        out[f"{key}[{i}][id]"] = item.id
                    else:
                        out[f"{key}[{i}]"] = str(item)
            elif isinstance(value, bool):
                out[key] = "true" if value else "false"
            else:
                out[key] = str(value)
        return out

    @classmethod
    def create(cls: Type[R], requester: "ShippingRequester", **fields: Any) -> R:
        """Build the resource, POST it to its collection and return it with its id set."""
        obj = cls(**fields)
        try:
            resp = requester.post(cls.operation, obj.serialize())
        except RequesterError as ex:
            raise ConstructionFailed(
                f"Could not create {cls.role} via {cls.operation}: {ex}") from ex

        new_id = resp.get("id")
        if not new_id:
            raise ConstructionFailed(
                f"Response from {cls.operation} carried no id")
        obj.id = new_id
        logger.debug("Created %s %s", cls.role, new_id)
        return obj

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def require_persisted(value: Any, kind: Type[Resource], name: str) -> None:
    """Raise InvalidArgument unless `value` is a `kind` that already has an id."""
    if not isinstance(value, kind):
        raise InvalidArgument(
            f"{name} must be a {kind.__name__}, got {type(value).__name__}")
    if not value.id:
        raise InvalidArgument(
            f"{name} must be created before it can be referenced (no id)")
