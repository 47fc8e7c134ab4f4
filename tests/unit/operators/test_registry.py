"""Unit tests for the operator registry."""

from pathlib import Path

from macctl.models.state import ResourceKind
from macctl.operators import FileOperator, get_operators


class TestGetOperators:
    """Tests for get_operators function."""

    def test_covers_every_kind(self, tmp_path: Path) -> None:
        """Every resource kind has an operator of that kind."""
        operators = get_operators(tmp_path / "config.toml")

        assert set(operators) == set(ResourceKind)
        for kind, operator in operators.items():
            assert operator.kind == kind

    def test_file_operator_paths(self, tmp_path: Path) -> None:
        """Dotfiles resolve against the config directory."""
        operators = get_operators(tmp_path / "config.toml", allow_script=True)
        file_operator = operators[ResourceKind.FILE]

        assert isinstance(file_operator, FileOperator)
        assert file_operator.config_dir == tmp_path.resolve()
        assert file_operator.generated_dir == tmp_path.resolve() / ".generated"
        assert file_operator.allow_script is True
