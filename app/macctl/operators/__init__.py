"""Operators executing diff entries against the machine.

This module provides the abstract Operator and one concrete operator per
resource kind.
"""

from pathlib import Path

from macctl.core.paths import get_generated_dir
from macctl.models.state import ResourceKind
from macctl.operators.appstore import AppStoreOperator
from macctl.operators.base import ExecutionError, Operator
from macctl.operators.brew import BrewOperator
from macctl.operators.defaults import DefaultsOperator
from macctl.operators.dock import DockOperator
from macctl.operators.files import FileOperator
from macctl.operators.git import GitOperator
from macctl.operators.wallpaper import WallpaperOperator


def get_operators(config_path: Path, allow_script: bool = False) -> dict[ResourceKind, Operator]:
    """Get one operator per resource kind.

    Args:
        config_path: Path of the loaded config file; managed file sources
            resolve against its directory.
        allow_script: Whether ``.py`` dotfile generators may run.

    Returns:
        Mapping of resource kind to its operator.
    """
    operators: list[Operator] = [
        BrewOperator(),
        BrewOperator(cask=True),
        AppStoreOperator(),
        DefaultsOperator(),
        DockOperator(),
        WallpaperOperator(),
        GitOperator(),
        FileOperator(
            config_dir=config_path.resolve().parent,
            generated_dir=get_generated_dir(config_path),
            allow_script=allow_script,
        ),
    ]
    return {operator.kind: operator for operator in operators}


__all__ = [
    "AppStoreOperator",
    "BrewOperator",
    "DefaultsOperator",
    "DockOperator",
    "ExecutionError",
    "FileOperator",
    "GitOperator",
    "Operator",
    "WallpaperOperator",
    "get_operators",
]
