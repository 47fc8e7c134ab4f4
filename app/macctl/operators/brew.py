"""Homebrew operator for formulae and casks."""

import logging

from macctl.models.diff import DiffAction, PackageDiff
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import ExecutionError, Operator
from macctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class BrewOperator(Operator[PackageDiff]):
    """Operator installing, upgrading and uninstalling Homebrew packages.

    Attributes:
        cask: Operate on casks instead of formulae.
    """

    # Timeout for brew operations (10 minutes, casks can be large downloads)
    _BREW_TIMEOUT: float = 600.0

    install_hint = "https://brew.sh"

    def __init__(self, cask: bool = False) -> None:
        self.cask = cask

    @property
    def kind(self) -> ResourceKind:
        """Return CASK or PACKAGE depending on mode."""
        return ResourceKind.CASK if self.cask else ResourceKind.PACKAGE

    @property
    def tool(self) -> str:
        return "brew"

    def is_available(self) -> bool:
        """Check if brew is available."""
        return command_exists("brew")

    def describe(self, entry: PackageDiff) -> str:
        noun = "cask" if self.cask else "formula"
        verbs = {
            DiffAction.ADD: "install",
            DiffAction.UPDATE: "upgrade",
            DiffAction.REMOVE: "uninstall",
        }
        return f"{verbs.get(entry.action, 'check')} {noun} {entry.name}"

    def _execute(self, entry: PackageDiff) -> ApplyResult:
        commands = {
            DiffAction.ADD: ("install", "Installed"),
            DiffAction.UPDATE: ("upgrade", "Upgraded"),
            DiffAction.REMOVE: ("uninstall", "Uninstalled"),
        }
        if entry.action not in commands:
            msg = f"Unsupported action: {entry.action.value}"
            raise ExecutionError(msg)

        subcommand, done = commands[entry.action]
        args = ["brew", subcommand]
        if self.cask:
            args.append("--cask")
        args.append(entry.name)

        logger.debug("Running %s", " ".join(args))
        self._check(run_command(args, timeout=self._BREW_TIMEOUT), f"brew {subcommand}")

        noun = "cask" if self.cask else "formula"
        return self._success(f"{done} {noun} {entry.name}")
