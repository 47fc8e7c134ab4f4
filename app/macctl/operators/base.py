"""Abstract base class for operators.

This module defines the Operator interface that every resource operator
must implement. Operators never raise: every failure is reported through
the returned ApplyResult.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from macctl.models.diff import DiffAction, DiffEntry
from macctl.models.result import ApplyResult

if TYPE_CHECKING:
    from macctl.models.state import ResourceKind
    from macctl.utils.shell import CommandResult

logger = logging.getLogger(__name__)

# Diff entry type an operator accepts
EntryT = TypeVar("EntryT", bound=DiffEntry)

# Verb used in messages for each action
ACTION_VERBS: dict[DiffAction, str] = {
    DiffAction.ADD: "add",
    DiffAction.UPDATE: "update",
    DiffAction.REMOVE: "remove",
    DiffAction.NONE: "check",
}


class ExecutionError(Exception):
    """Raised inside an operator when a step cannot be carried out."""


class Operator(ABC, Generic[EntryT]):
    """Abstract base class for all operators.

    Operators execute one diff entry at a time against the machine and
    report the outcome as an ApplyResult.

    Example:
        >>> operator = BrewOperator()
        >>> result = operator.execute(PackageDiff(action=DiffAction.ADD, name="wget"))
        >>> print(result.success, result.message)
    """

    # Hint shown when the underlying tool is missing
    install_hint: str | None = None

    @property
    @abstractmethod
    def kind(self) -> ResourceKind:
        """Return the resource kind this operator handles."""

    @property
    @abstractmethod
    def tool(self) -> str:
        """Return the name of the command this operator drives."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is available on the system.

        Returns:
            True if the operator can be used, False otherwise.
        """

    def describe(self, entry: EntryT) -> str:
        """Describe what executing ``entry`` does, e.g. "add wget"."""
        return f"{ACTION_VERBS[entry.action]} {entry.label}"

    def execute(self, entry: EntryT) -> ApplyResult:
        """Execute one diff entry.

        Args:
            entry: Diff entry whose action is not NONE.

        Returns:
            ApplyResult describing the outcome. Failures are captured
            here and never propagate.
        """
        if not self.is_available():
            error = f"{self.tool} is not installed"
            if self.install_hint:
                error += f" (install with: {self.install_hint})"
            return self._failure(f"Cannot {self.describe(entry)}", error)

        try:
            return self._execute(entry)
        except ExecutionError as e:
            return self._failure(f"Failed to {self.describe(entry)}", str(e))
        except subprocess.TimeoutExpired as e:
            return self._failure(
                f"Failed to {self.describe(entry)}",
                f"{self.tool} timed out after {e.timeout:.0f}s",
            )
        except OSError as e:
            return self._failure(f"Failed to {self.describe(entry)}", str(e))

    @abstractmethod
    def _execute(self, entry: EntryT) -> ApplyResult:
        """Carry out ``entry``.

        Raises:
            ExecutionError: If the step fails.
        """

    def _success(self, message: str) -> ApplyResult:
        logger.info(message)
        return ApplyResult(kind=self.kind, success=True, message=message)

    def _failure(self, message: str, error: str) -> ApplyResult:
        logger.warning("%s: %s", message, error)
        return ApplyResult(kind=self.kind, success=False, message=message, error=error)

    @staticmethod
    def _check(result: CommandResult, command: str) -> CommandResult:
        """Raise ExecutionError for a failed command result.

        Args:
            result: Result of the command.
            command: Short command description for the error message.

        Returns:
            The result, when successful.
        """
        if not result.success:
            msg = f"{command} failed: {result.error_text}"
            raise ExecutionError(msg)
        return result
