"""Dotfile operator: generate content, then symlink it into place.

Every managed file is regenerated into the ``.generated`` directory next
to the config file and the target is (re)pointed at the generated copy.
"""

import logging
import os
from pathlib import Path

from macctl.core.paths import expand_path
from macctl.models.diff import DiffAction, FileDiff
from macctl.models.result import ApplyResult
from macctl.models.state import ResourceKind
from macctl.operators.base import ExecutionError, Operator
from macctl.utils.scripts import ScriptError, load_script

logger = logging.getLogger(__name__)


class FileOperator(Operator[FileDiff]):
    """Operator generating dotfiles and linking them into place.

    Sources are plain files copied verbatim, or ``.py`` generators that
    expose ``content`` as a string or a callable returning one. Generators
    run only when ``allow_script`` is set.

    Attributes:
        config_dir: Directory sources are resolved against.
        generated_dir: Directory generated files are written to.
        allow_script: Whether ``.py`` generators may be executed.
    """

    def __init__(self, config_dir: Path, generated_dir: Path, allow_script: bool = False) -> None:
        self.config_dir = config_dir
        self.generated_dir = generated_dir
        self.allow_script = allow_script

    @property
    def kind(self) -> ResourceKind:
        """Return FILE as the resource kind."""
        return ResourceKind.FILE

    @property
    def tool(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        """The filesystem is always available."""
        return True

    def describe(self, entry: FileDiff) -> str:
        return f"{entry.action.value} file {entry.target}"

    def generate(self, source: str) -> str:
        """Produce the content of a managed file.

        Args:
            source: Source path relative to the config directory.

        Returns:
            Generated file content.

        Raises:
            ExecutionError: If the source is missing or the generator fails.
        """
        path = (self.config_dir / os.path.expanduser(source)).resolve()
        if not path.is_file():
            msg = f"Source file not found: {path}"
            raise ExecutionError(msg)

        if path.suffix != ".py":
            try:
                return path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                msg = f"{path.name} is not valid UTF-8: {e.reason}"
                raise ExecutionError(msg) from e

        if not self.allow_script:
            msg = f"{path.name} is a Python generator; pass --allow-script to run it"
            raise ExecutionError(msg)

        try:
            module = load_script(path)
        except ScriptError as e:
            raise ExecutionError(str(e)) from e

        content = getattr(module, "content", None)
        if callable(content):
            try:
                content = content()
            except Exception as e:
                msg = f"{path.name}: content() raised {type(e).__name__}: {e}"
                raise ExecutionError(msg) from e
        if not isinstance(content, str):
            msg = f"{path.name} must define 'content' as a string or a function returning one"
            raise ExecutionError(msg)
        return content

    def _execute(self, entry: FileDiff) -> ApplyResult:
        target = expand_path(entry.target)
        content = self.generate(entry.source)

        self.generated_dir.mkdir(parents=True, exist_ok=True)
        generated_path = self.generated_dir / os.path.basename(target)
        try:
            generated_path.write_text(content, encoding="utf-8")
        except UnicodeEncodeError as e:
            msg = f"Generated content for {entry.target} cannot be encoded as UTF-8: {e.reason}"
            raise ExecutionError(msg) from e
        logger.debug("Generated %s", generated_path)

        if entry.backup and os.path.exists(target) and not os.path.islink(target):
            backup_path = f"{target}.backup"
            os.replace(target, backup_path)
            logger.info("Backed up %s to %s", target, backup_path)

        if os.path.lexists(target):
            if os.path.isdir(target) and not os.path.islink(target):
                msg = f"{target} is a directory"
                raise ExecutionError(msg)
            os.unlink(target)

        os.makedirs(os.path.dirname(target), exist_ok=True)
        os.symlink(generated_path, target)

        verb = "Created" if entry.action == DiffAction.ADD else "Updated"
        return self._success(f"{verb} symlink {entry.target} -> {generated_path}")
