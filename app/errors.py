class StatsError(Exception):
    """Base class for errors raised while tracking request counts."""

    status_code = 500


class StoreUnavailable(StatsError):
    """The key-value store could not be reached or initialised."""


class NotFound(StatsError):
    """No request has been recorded yet."""

    status_code = 404


class DecodeError(StatsError):
    """A stored key does not decode back into a parameter set."""
