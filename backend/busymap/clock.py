"""Wall-clock sampling for the serving layer.

The popularity engine never reads the clock itself; request handlers sample
"now" here, in the venues' reference timezone, and pass it in explicitly.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from busymap.config import get_settings


def reference_zone() -> ZoneInfo:
    """Timezone venues operate in."""
    return ZoneInfo(get_settings().reference_timezone)


def local_now() -> datetime:
    """Current time as an aware datetime in the reference timezone."""
    return datetime.now(reference_zone())
