from __future__ import annotations

from functools import lru_cache

from revstox.db import get_session_factory
from revstox.wiring import Services, build_services


@lru_cache
def get_services() -> Services:
    return build_services(get_session_factory())
