import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Hashable


class KeyedLock:
    """asyncio.Lock per key, dropped again once nobody holds or waits for it."""

    def __init__(self):
        self._locks: dict = {}
        self._holders: defaultdict = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)


# Serializes "invalidate prior tokens, then issue a new one" per user
password_reset_issue_locks = KeyedLock()
