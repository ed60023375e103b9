"""Port for the destructive-action gate."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConfirmAction(Protocol):
    """Ask the user to confirm ``prompt``; nothing is sent unless this returns True."""

    async def __call__(self, prompt: str) -> bool: ...


async def always_confirm(prompt: str) -> bool:  # noqa: ARG001
    """Pre-approved confirmation (``--yes`` on the command line)."""
    return True
