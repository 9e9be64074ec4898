# src/services/errors.py

"""Exception hierarchy shared by stores, the aggregator and API handlers."""


class PriceCompareError(Exception):
    """Base class for all price_compare errors."""


class NotFound(PriceCompareError):
    """A requested entity does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class Unresolvable(NotFound):
    """An offer id from a caller-supplied set could not be resolved.

    Absorbed by the aggregator; never surfaced to its caller.
    """

    def __init__(self, offer_id: str) -> None:
        super().__init__("Offer", offer_id)


class InvalidArgument(PriceCompareError):
    """Malformed input: short query, missing or badly typed field."""


class StoreUnavailable(PriceCompareError):
    """The backing store could not be reached or failed mid-query."""
