class SeedStreamError(Exception):
    """Base class for seedstream-specific errors."""


# Request validation
class InvalidRequest(SeedStreamError):
    pass


class InvalidBound(SeedStreamError):
    pass


class EmptyCollection(SeedStreamError):
    pass


# Seeding / entropy
class SeedTooWeak(SeedStreamError):
    pass


class EntropyExhausted(SeedStreamError):
    pass


class EntropySourceReused(SeedStreamError):
    pass


# Lifecycle
class GeneratorClosed(SeedStreamError):
    """The ``Closed`` error: the generator or service was closed."""
