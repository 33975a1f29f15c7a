from __future__ import annotations

from typing import Any

from ..errors import InvalidArgument
from .resource import Resource


class CustomsItem(Resource):
    role = "customs_item"
    operation = "/customs_items"
    fieldnames = (
        "description",
        "quantity",
        "weight",
        "value",
        "hs_tariff_number",
        "origin_country",
    )


class CustomsInfo(Resource):
    """Customs declaration for international shipments.

    `customs_items` must hold CustomsItem resources that were already created;
    they are sent by reference.
    """

    role = "customs_info"
    operation = "/customs_infos"
    fieldnames = (
        "customs_certify",
        "customs_signer",
        "contents_type",
        "contents_explanation",
        "eel_pfc",
        "non_delivery_option",
        "restriction_type",
        "restriction_comments",
        "customs_items",
    )

    def __init__(self, id=None, **fields: Any) -> None:
        super().__init__(id, **fields)
        for item in self.customs_items or ():
            if not isinstance(item, CustomsItem) or not item.id:
                raise InvalidArgument(
                    "customs_items must contain created CustomsItem resources")
