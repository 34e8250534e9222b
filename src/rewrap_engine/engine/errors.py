"""Engine-level defects; recoverable outcomes are result statuses instead."""

from __future__ import annotations

from typing import Optional


class EngineBusyError(RuntimeError):
    """Raised when a command starts while another one awaits its delimiter."""

    def __init__(self, command: str, *, pending: Optional[str] = None) -> None:
        message = f"Cannot start '{command}' while another command is pending"
        if pending:
            message = f"{message} ('{pending}')"
        super().__init__(message)
        self.command = command
        self.pending = pending


class EngineStateError(RuntimeError):
    """Raised on an illegal state transition or misuse of a pending command."""

    def __init__(self, message: str, *, state: object | None = None) -> None:
        super().__init__(message)
        self.state = state
