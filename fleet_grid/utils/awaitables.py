"""Helpers for callbacks that may be sync or async."""

from __future__ import annotations

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await ``value`` when a callback returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value
