"""Loading of user-supplied Python files.

Executable configuration and dotfile generators run arbitrary code, so
callers only reach this module when the user passed ``--allow-script``.
"""

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType

logger = logging.getLogger(__name__)


class ScriptError(Exception):
    """Raised when a Python file cannot be loaded."""


def load_script(path: Path) -> ModuleType:
    """Execute a Python file and return it as a module.

    The file is executed fresh on every call and never added to
    ``sys.modules``.

    Args:
        path: Path to the ``.py`` file.

    Returns:
        The executed module.

    Raises:
        ScriptError: If the file is missing or raises while executing.
    """
    if not path.is_file():
        msg = f"Script not found: {path}"
        raise ScriptError(msg)

    module_name = f"_macctl_script_{path.stem}"
    loader_spec = importlib.util.spec_from_file_location(module_name, path)
    if loader_spec is None or loader_spec.loader is None:
        msg = f"Cannot load {path} as a Python module"
        raise ScriptError(msg)

    module = importlib.util.module_from_spec(loader_spec)
    logger.debug("Executing %s", path)
    try:
        loader_spec.loader.exec_module(module)
    except Exception as e:
        msg = f"{path} raised {type(e).__name__}: {e}"
        raise ScriptError(msg) from e
    finally:
        sys.modules.pop(module_name, None)
    return module
