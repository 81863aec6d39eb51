"""
Per-device asyncio locks
"""
import asyncio
from typing import Dict


class KeyedLocks:
    """One lock per key so unrelated devices never wait on each other"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def discard(self, key: str):
        """Drop the lock for a key unless someone holds it"""
        lock = self._locks.get(key)
        if lock is not None and not lock.locked():
            del self._locks[key]

    def __contains__(self, key: str) -> bool:
        return key in self._locks

    def __len__(self) -> int:
        return len(self._locks)
