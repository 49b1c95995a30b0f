"""Error taxonomy for the popularity engine.

Missing popularity tables or opening hours are not errors: they resolve to
the documented zero / always-open fallbacks instead of raising.
"""


class PopularityError(Exception):
    """Base class for popularity engine errors."""


class InvalidInputError(PopularityError, ValueError):
    """Caller supplied a malformed hour, weekday, table or event reference."""


class UpstreamUnavailableError(PopularityError):
    """A venue, check-in or event source could not be read."""
