from datetime import datetime
from typing import Annotated, Optional

import pytz
from fastapi import Depends, Query

from .core import Settings, get_settings
from .core.timeutils import ensure_aware


def reference_instant(
    at: Optional[datetime] = Query(
        None,
        description="Reference instant (ISO 8601). Naive values use the configured timezone; defaults to now.",
    ),
) -> datetime:
    """The instant every derivation in a request is evaluated against"""
    if at is None:
        return datetime.now(pytz.UTC)
    return ensure_aware(at, get_settings().tzinfo)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
NowDep = Annotated[datetime, Depends(reference_instant)]
