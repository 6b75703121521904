from typing import Optional

from .config import Settings, get_settings


class BaseService:
    """Base service implementation with common dependencies.

    Services hold configuration only. Every operation takes the reference
    instant explicitly and keeps no state between calls.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
