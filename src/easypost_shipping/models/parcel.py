from __future__ import annotations

from .resource import Resource


class Parcel(Resource):
    """Dimensions in inches, weight in ounces.

    A `predefined_package` name (e.g. "FlatRateEnvelope") replaces the
    dimensions for carriers that support it.
    """

    role = "parcel"
    operation = "/parcels"
    fieldnames = ("length", "width", "height", "weight", "predefined_package")
