"""
Progress reporting for CLI commands.

A single shared reporter shows the current step in a Rich status spinner and
prints a checkmark line for every finished step.
"""

from typing import List, Optional

from rich.console import Console
from rich.status import Status


class ProgressReporter:
    """
    Shared status reporter with step completion tracking.
    """

    def __init__(self):
        self._status: Optional[Status] = None
        self._console: Optional[Console] = None
        self._completed_steps: List[str] = []
        self._current_step: Optional[str] = None

    @property
    def completed_steps(self) -> List[str]:
        return list(self._completed_steps)

    def initialize(self, console: Console, initial_message: str = "Starting...") -> Status:
        """
        Bind the reporter to a console and return a status for use as a context manager.
        """
        self._console = console
        self._status = console.status(f"[dim]{initial_message}[/dim]")
        self._completed_steps = []
        self._current_step = initial_message
        return self._status

    def step(self, message: str) -> None:
        """Finish the current step and show a new one."""
        if self._status is None:
            return
        self.complete_step()
        self._current_step = message
        self._status.update(f"[dim]{message}[/dim]")

    def complete_step(self, message: Optional[str] = None) -> None:
        """Mark the current step as completed without starting a new one."""
        if self._current_step is None:
            return
        completion_msg = message or self._current_step
        self._completed_steps.append(completion_msg)
        if self._console is not None:
            self._console.print(f"[green]✓[/green] [dim]{completion_msg}[/dim]")
        self._current_step = None


# Global reporter instance
reporter = ProgressReporter()
