"""Error types raised by the boostly state engine."""


class BoostlyError(Exception):
    """Base class for all engine errors."""


class ValidationError(BoostlyError):
    """Input rejected before any state was touched."""


class NotFoundError(BoostlyError):
    """A task index is out of range."""


class PersistenceError(BoostlyError):
    """The persistence gateway could not read or write a snapshot."""
