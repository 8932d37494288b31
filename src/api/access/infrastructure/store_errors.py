"""Translation of database faults into port exceptions."""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from access.ports.exceptions import UpstreamUnavailableError

T = TypeVar("T")


def translate_store_errors(
    method: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """Wrap a repository method so database faults surface as upstream errors.

    The wrapped object must expose ``_probe.store_unavailable``. Driver
    level connection failures (OSError) are translated too.
    """

    @functools.wraps(method)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        try:
            return await method(self, *args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            self._probe.store_unavailable(operation=method.__name__, error=str(e))
            raise UpstreamUnavailableError("Access store unavailable") from e

    return wrapper
