"""Preference operator using ``defaults write`` and ``defaults delete``."""

from macctl.core.values import format_value
from macctl.models.diff import DiffAction, SettingDiff
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import Operator
from macctl.utils.shell import command_exists, run_command


class DefaultsOperator(Operator[SettingDiff]):
    """Operator writing and deleting macOS preference keys.

    Restarting the process that owns a domain is not done here; the
    orchestrator coalesces restarts across all settings.
    """

    @property
    def kind(self) -> ResourceKind:
        """Return SETTING as the resource kind."""
        return ResourceKind.SETTING

    @property
    def tool(self) -> str:
        return "defaults"

    def is_available(self) -> bool:
        """Check if the defaults tool is available."""
        return command_exists("defaults")

    def _execute(self, entry: SettingDiff) -> ApplyResult:
        if entry.action == DiffAction.REMOVE:
            self._check(
                run_command(["defaults", "delete", entry.domain, entry.key]),
                "defaults delete",
            )
            return self._success(f"Removed setting {entry.domain} {entry.key}")

        args = [
            "defaults",
            "write",
            entry.domain,
            entry.key,
            *format_value(entry.desired_value, entry.value_type),
        ]
        self._check(run_command(args), "defaults write")

        verb = "Added" if entry.action == DiffAction.ADD else "Updated"
        return self._success(
            f"{verb} setting {entry.domain} {entry.key} = {entry.desired_value!r}"
        )
