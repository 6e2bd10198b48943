"""Current time source.

Every time-relative rule (CFP windows, "future" filters, searchability) takes
``now`` explicitly. Endpoints receive it through the ``get_now`` dependency so
tests can pin the clock with ``app.dependency_overrides``.
"""

from datetime import datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how datetimes are stored."""
    return datetime.utcnow().replace(microsecond=0)


def get_now() -> datetime:
    """FastAPI dependency returning the request's notion of "now"."""
    return utcnow()
