"""
Feature flag storage
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from flag_service.feature_flags.lock import ReadWriteLock

logger = logging.getLogger(__name__)


class FlagStore(ABC):
    """Named boolean flags.

    A key that was never set reads as ``False``; absence is not an error.
    Implementations must be safe to call from any number of concurrent
    request handlers.
    """

    @abstractmethod
    async def get_flag(self, key: str) -> bool:
        """Return the current value of ``key``, or ``False`` if unset."""
        ...

    @abstractmethod
    async def set_flag(self, key: str, value: bool) -> bool:
        """Create or replace ``key`` and return ``True`` once committed."""
        ...


class InMemoryFlagStore(FlagStore):
    """Process-local store backed by a ``{key: bool}`` dict."""

    def __init__(self, flags: Optional[Dict[str, bool]] = None):
        self._flags: Dict[str, bool] = dict(flags or {})
        self._lock = ReadWriteLock()

    async def get_flag(self, key: str) -> bool:
        async with self._lock.read():
            value = self._flags.get(key, False)
        logger.debug("Flag read", extra={"flag_key": key, "flag_value": value})
        return value

    async def set_flag(self, key: str, value: bool) -> bool:
        async with self._lock.write():
            self._flags[key] = value
        logger.debug("Flag set", extra={"flag_key": key, "flag_value": value})
        return True

    def __len__(self) -> int:
        return len(self._flags)
