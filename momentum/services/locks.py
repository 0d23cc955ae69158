from __future__ import annotations

import asyncio
import uuid
from collections import defaultdict


# Streak and daily-summary updates read then write; they must not interleave per user.
_user_locks: dict[uuid.UUID, asyncio.Lock] = defaultdict(asyncio.Lock)


def user_write_lock(user_id: uuid.UUID) -> asyncio.Lock:
    return _user_locks[user_id]
