"""User interaction capabilities.

Prompts and confirmation modals are provided by the UI. The editor only
depends on the InteractionProvider protocol so it can be driven without a
real dialog layer.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from typing import Protocol

from article_editor.models import ConfirmationRequest, ConfirmOutcome

logger = logging.getLogger(__name__)


class InteractionProvider(Protocol):
    """Dialog collaborator used by context actions."""

    def prompt(self, message: str, default: str = "") -> str | None:
        """Ask the user for a value.

        Returns:
            The entered value, or None if the prompt was cancelled
        """
        ...

    def confirm(self, request: ConfirmationRequest) -> ConfirmOutcome:
        """Show a confirmation modal for request.

        Returns:
            CONFIRMED or CANCELLED when answered immediately, DEFERRED when
            the modal stays open and will be answered by a later event
        """
        ...


class DeferredInteraction:
    """Interaction provider for event-driven UIs.

    Confirmation modals stay open (DEFERRED) until the UI reports the
    answer. Prompts are answered from a queue of prepared answers; an
    exhausted queue behaves like a cancelled prompt.
    """

    def __init__(self, prompt_answers: Iterable[str | None] = ()) -> None:
        self._answers: deque[str | None] = deque(prompt_answers)

    def queue_answer(self, answer: str | None) -> None:
        """Queue the answer for the next prompt."""
        self._answers.append(answer)

    def prompt(self, message: str, default: str = "") -> str | None:
        if not self._answers:
            logger.debug(f"No prepared answer for prompt '{message}', treating as cancelled")
            return None
        return self._answers.popleft()

    def confirm(self, request: ConfirmationRequest) -> ConfirmOutcome:
        logger.debug(f"Modal opened for {request.action.value} on {request.target_id}")
        return ConfirmOutcome.DEFERRED


class AutoConfirmInteraction:
    """Interaction provider answering every modal with a fixed outcome.

    Attributes:
        outcome: Answer returned for every confirmation
        prompt_answer: Answer returned for every prompt (None cancels)
        requests: Confirmation requests seen, in order
    """

    def __init__(
        self,
        outcome: ConfirmOutcome = ConfirmOutcome.CONFIRMED,
        prompt_answer: str | None = None,
    ) -> None:
        self.outcome = outcome
        self.prompt_answer = prompt_answer
        self.requests: list[ConfirmationRequest] = []

    def prompt(self, message: str, default: str = "") -> str | None:
        return self.prompt_answer

    def confirm(self, request: ConfirmationRequest) -> ConfirmOutcome:
        self.requests.append(request)
        return self.outcome
