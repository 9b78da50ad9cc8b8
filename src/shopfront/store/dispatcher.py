"""Mutation dispatcher.

Sends one write to one or more backends. Targets run concurrently and fail
independently; the call succeeds when at least one target accepted the
write and raises ``AllTargetsFailed`` otherwise. No retries.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from .client import SourceClient
from .exceptions import AllTargetsFailed, MalformedPayload, SourceUnavailable

logger = logging.getLogger(__name__)

# Past-tense verb and preposition used in result messages
ACTION_WORDS = {
    "create": ("Created", "in"),
    "update": ("Updated", "in"),
    "delete": ("Deleted", "from"),
}


@dataclass(frozen=True)
class MutationTarget:
    """A backend and the path the write goes to."""

    client: SourceClient
    path: str

    @property
    def label(self) -> str:
        return self.client.label


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a write that at least one backend accepted."""

    data: Any
    succeeded: tuple
    failures: dict = field(default_factory=dict)
    message: str = ""

    @property
    def partial(self) -> bool:
        return bool(self.failures)


@dataclass(frozen=True)
class _Attempt:
    target: MutationTarget
    ok: bool
    data: Any = None
    reason: str = ""


def describe_success(action: str, labels) -> str:
    """``"Updated in Real & Mock API"`` style summary of the succeeded targets."""
    verb, preposition = ACTION_WORDS.get(action, (f"{action.capitalize()}d", "in"))
    return f"{verb} {preposition} {' & '.join(labels)} API"


class MutationDispatcher:
    """Runs writes against backend targets with failure isolation."""

    async def _attempt(self, target: MutationTarget, method: str, payload: Any) -> _Attempt:
        try:
            data = await target.client.request(method, target.path, payload=payload)
        except SourceUnavailable as e:
            return _Attempt(target=target, ok=False, reason=e.reason)
        except MalformedPayload:
            # The write went through; only the echo was unreadable
            return _Attempt(target=target, ok=True)
        return _Attempt(target=target, ok=True, data=data)

    async def dispatch(
        self,
        method: str,
        targets: list[MutationTarget],
        *,
        payload: Any = None,
        action: str = "update",
        subject: str = "record",
    ) -> MutationResult:
        """Send the write to every target and aggregate the outcome.

        Args:
            method: HTTP method (POST, PUT, DELETE)
            targets: Backends to try, in reporting order
            payload: JSON body, if any
            action: ``create``, ``update`` or ``delete``, used in messages
            subject: What is being changed, e.g. ``"product 150"``

        Returns:
            MutationResult naming the targets that accepted the write

        Raises:
            AllTargetsFailed: If no target accepted the write
        """
        attempts = await asyncio.gather(
            *(self._attempt(target, method, payload) for target in targets)
        )

        succeeded = [attempt for attempt in attempts if attempt.ok]
        failures = {attempt.target.label: attempt.reason for attempt in attempts if not attempt.ok}

        if not succeeded:
            logger.error("Failed to %s %s on every target: %s", action, subject, failures)
            raise AllTargetsFailed(action, subject, failures)

        labels = tuple(attempt.target.label for attempt in succeeded)
        if failures:
            logger.warning(
                "%s %s only partially applied: succeeded on %s, failed on %s",
                action.capitalize(),
                subject,
                ", ".join(labels),
                failures,
            )
        else:
            logger.info("%s %s on %s", action.capitalize(), subject, ", ".join(labels))

        data = next((attempt.data for attempt in succeeded if attempt.data is not None), None)
        return MutationResult(
            data=data,
            succeeded=labels,
            failures=failures,
            message=describe_success(action, labels),
        )

    async def create(self, target: MutationTarget, payload: Any, subject: str = "record") -> MutationResult:
        """Create on a single designated backend."""
        return await self.dispatch("POST", [target], payload=payload, action="create", subject=subject)
