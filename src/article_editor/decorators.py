"""Decorators for editor event handlers.

Menu entries, toolbar buttons and key bindings are simply unavailable
when their preconditions do not hold (no image selected, modal open,
editor not in edit mode). Handlers wrapped with unavailable_is_noop turn
PreconditionError into a logged no-op; every other exception propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps

from article_editor.models import PreconditionError

logger = logging.getLogger(__name__)


def unavailable_is_noop[**P, R](func: Callable[P, R]) -> Callable[P, R | None]:
    """Decorator to ignore handlers whose preconditions are not met.

    Usage:
        @unavailable_is_noop
        def on_delete(self, event: MenuCommand) -> bool:
            return self.actions.delete()

    Args:
        func: The handler to wrap.

    Returns:
        Wrapped function returning None instead of raising PreconditionError.
    """

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | None:
        try:
            return func(*args, **kwargs)
        except PreconditionError as e:
            logger.debug(
                "%s unavailable: code=%s, message=%s",
                func.__name__,
                e.code.value,
                e.message,
            )
            return None

    return wrapper
