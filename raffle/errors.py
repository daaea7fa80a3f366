"""Exception hierarchy shared by the raffle session engine."""


class RaffleError(Exception):
    """Base class for every error raised by the :mod:`raffle` package."""


class StorageError(RaffleError):
    """A storage tier could not read, write, or remove a value."""


class ConfigurationError(RaffleError, ValueError):
    """The supplied roster or prize lots cannot start a session."""


class DrawPreconditionError(RaffleError):
    """A draw cannot start, e.g. because the participant pool is empty."""


class DrawStateError(RaffleError):
    """A draw operation was requested in a state that does not allow it."""


class UnsupportedImageError(RaffleError, ValueError):
    """Prize artwork is not a PNG or JPEG image."""


__all__ = [
    "ConfigurationError",
    "DrawPreconditionError",
    "DrawStateError",
    "RaffleError",
    "StorageError",
    "UnsupportedImageError",
]
