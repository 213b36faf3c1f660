"""Exception classes for Spendlog."""


class SpendlogError(Exception):
    """Base exception for Spendlog."""
    pass


# Caller errors: reported back to the user, never fatal
class NotFound(SpendlogError):
    """Category or entry is absent, or belongs to another conversation."""
    pass


class InvalidAmount(SpendlogError):
    """Amount is negative or not representable as whole cents."""
    pass


class InvalidCategory(SpendlogError):
    """Category does not belong to the conversation, or is malformed."""
    pass


# Storage errors
class StoreUnavailable(SpendlogError):
    """The backing store could not be reached or a read/write failed."""
    pass


class SchemaError(SpendlogError):
    """A migration failed or the store has an incompatible structure."""
    pass


class AggregationOverflow(SpendlogError):
    """A sum would exceed the safe integer range."""
    pass
