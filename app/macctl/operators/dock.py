"""Dock operator using ``dockutil``.

Every change is made with ``--no-restart``; the Dock is restarted once
after the whole app set has been reconciled.
"""

from macctl.models.diff import DiffAction, DockDiff
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import Operator
from macctl.utils.shell import command_exists, run_command


class DockOperator(Operator[DockDiff]):
    """Operator adding and removing persistent Dock apps."""

    install_hint = "brew install dockutil"

    @property
    def kind(self) -> ResourceKind:
        """Return DOCK as the resource kind."""
        return ResourceKind.DOCK

    @property
    def tool(self) -> str:
        return "dockutil"

    def is_available(self) -> bool:
        """Check if dockutil is available."""
        return command_exists("dockutil")

    def _execute(self, entry: DockDiff) -> ApplyResult:
        if entry.action == DiffAction.REMOVE:
            self._check(
                run_command(["dockutil", "--remove", entry.name, "--no-restart"]),
                "dockutil --remove",
            )
            return self._success(f"Removed {entry.name} from Dock")

        args = ["dockutil", "--add", entry.bundle_path or entry.name, "--no-restart"]
        if entry.position is not None:
            args.extend(["--position", str(entry.position)])
        self._check(run_command(args), "dockutil --add")
        return self._success(f"Added {entry.name} to Dock")
