"""Unit tests for observed-state collection."""

import subprocess
from typing import Any
from unittest.mock import patch

import pytest
from macctl.collectors.base import CollectionError, Collector
from macctl.core.observe import collect_observed
from macctl.core.record import PersistedRecord
from macctl.models.config import DesiredConfig
from macctl.models.state import ObservedState, ResourceKind


class StubCollector(Collector):
    """Collector returning a fixed value or raising a fixed error."""

    def __init__(
        self,
        kind: ResourceKind,
        value: Any = None,
        available: bool = True,
        error: Exception | None = None,
    ) -> None:
        self._kind = kind
        self.value = value
        self.available = available
        self.error = error

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    def is_available(self) -> bool:
        return self.available

    def collect(self, config: DesiredConfig, record: PersistedRecord) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class TestCollectObserved:
    """Tests for collect_observed function."""

    def test_fills_fields_per_kind(
        self, sample_config: DesiredConfig, empty_record: PersistedRecord
    ) -> None:
        """Each collector fills the ObservedState field for its kind."""
        collectors = [
            StubCollector(ResourceKind.PACKAGE, {"git": "2.44.0"}),
            StubCollector(ResourceKind.APPSTORE, {497799835: "Xcode"}),
            StubCollector(ResourceKind.FILE, {"/home/jane/.zshrc": "/x/.zshrc"}),
            StubCollector(ResourceKind.DOCK, ("Safari",)),
            StubCollector(ResourceKind.WALLPAPER, "/pics/a.png"),
        ]

        observed = collect_observed(sample_config, empty_record, collectors)

        assert observed.packages == {"git": "2.44.0"}
        assert observed.apps == {497799835: "Xcode"}
        assert observed.symlinks == {"/home/jane/.zshrc": "/x/.zshrc"}
        assert observed.dock_apps == ("Safari",)
        assert observed.wallpaper == "/pics/a.png"
        assert observed.casks == {}

    def test_unavailable_declared_kind_warns(
        self, sample_config: DesiredConfig, empty_record: PersistedRecord
    ) -> None:
        """A missing tool for a declared kind is reported with an install hint."""
        with patch("macctl.core.observe.print_warning") as mock_warn:
            observed = collect_observed(
                sample_config,
                empty_record,
                [StubCollector(ResourceKind.APPSTORE, available=False)],
            )

        assert observed.apps == {}
        mock_warn.assert_called_once()
        assert "brew install mas" in mock_warn.call_args[0][0]

    def test_unavailable_undeclared_kind_is_silent(self, empty_record: PersistedRecord) -> None:
        """A missing tool for an undeclared kind is not reported."""
        with patch("macctl.core.observe.print_warning") as mock_warn:
            collect_observed(
                DesiredConfig(),
                empty_record,
                [StubCollector(ResourceKind.DOCK, available=False)],
            )

        mock_warn.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            CollectionError("brew list failed"),
            FileNotFoundError("brew"),
            subprocess.TimeoutExpired(["brew"], 120),
        ],
    )
    def test_failure_degrades_to_empty(
        self,
        sample_config: DesiredConfig,
        empty_record: PersistedRecord,
        error: Exception,
    ) -> None:
        """A failing collector leaves its kind empty and the others intact."""
        collectors = [
            StubCollector(ResourceKind.PACKAGE, error=error),
            StubCollector(ResourceKind.CASK, {"firefox": "124.0"}),
        ]

        with patch("macctl.core.observe.print_warning") as mock_warn:
            observed = collect_observed(sample_config, empty_record, collectors)

        assert observed.packages == {}
        assert observed.casks == {"firefox": "124.0"}
        mock_warn.assert_called_once()

    def test_no_collectors(self, empty_record: PersistedRecord) -> None:
        """Without collectors everything is empty."""
        assert collect_observed(DesiredConfig(), empty_record, []) == ObservedState()
