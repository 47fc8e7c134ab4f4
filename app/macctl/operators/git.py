"""Git configuration operator."""

from macctl.models.diff import GitDiff
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import Operator
from macctl.utils.shell import command_exists, run_command


class GitOperator(Operator[GitDiff]):
    """Operator setting git config keys."""

    @property
    def kind(self) -> ResourceKind:
        """Return GIT as the resource kind."""
        return ResourceKind.GIT

    @property
    def tool(self) -> str:
        return "git"

    def is_available(self) -> bool:
        """Check if git is available."""
        return command_exists("git")

    def _execute(self, entry: GitDiff) -> ApplyResult:
        scope = f"--{entry.scope}"
        self._check(
            run_command(["git", "config", scope, entry.key, entry.desired_value or ""]),
            "git config",
        )
        return self._success(f"Set git {entry.scope} {entry.key} = {entry.desired_value}")
