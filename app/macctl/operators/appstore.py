"""Mac App Store operator using ``mas``."""

from macctl.models.diff import AppStoreDiff, DiffAction
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import ExecutionError, Operator
from macctl.utils.shell import command_exists, run_command


class AppStoreOperator(Operator[AppStoreDiff]):
    """Operator installing Mac App Store apps.

    ``mas`` cannot uninstall apps, so removals always fail with a hint to
    remove the app by hand.
    """

    _MAS_TIMEOUT: float = 900.0

    install_hint = "brew install mas"

    @property
    def kind(self) -> ResourceKind:
        """Return APPSTORE as the resource kind."""
        return ResourceKind.APPSTORE

    @property
    def tool(self) -> str:
        return "mas"

    def is_available(self) -> bool:
        """Check if mas is available."""
        return command_exists("mas")

    def _execute(self, entry: AppStoreDiff) -> ApplyResult:
        if entry.action == DiffAction.REMOVE:
            msg = "mas does not support uninstalling apps; remove it manually"
            raise ExecutionError(msg)

        self._check(
            run_command(["mas", "install", str(entry.id)], timeout=self._MAS_TIMEOUT),
            "mas install",
        )
        return self._success(f"Installed {entry.name} ({entry.id})")
