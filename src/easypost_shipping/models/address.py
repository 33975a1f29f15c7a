from __future__ import annotations

from .resource import Resource


class Address(Resource):
    role = "address"
    operation = "/addresses"
    fieldnames = (
        "name",
        "company",
        "street1",
        "street2",
        "city",
        "state",
        "zip",
        "country",
        "phone",
        "email",
    )
