# tests/conftest.py
"""Shared test fixtures and helpers.

Test components:
- RecordingComponent: declares arbitrary ports, records every run() call,
  and returns a configurable result (plain value, callable, or exception)
- FakeResolver: dict-backed component resolver for graph tests

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Callable, Iterator, Mapping
from typing import Any

import pytest
import structlog
from hypothesis import Verbosity, settings

from sluice.contracts.errors import ComponentResolutionError
from sluice.plugins.manager import PluginManager

settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("nightly", max_examples=1000, deadline=None)
settings.register_profile("debug", max_examples=10, deadline=None, verbosity=Verbosity.verbose)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "ci"))


class RecordingComponent:
    """Component test double.

    Args:
        inputs: Input port schemas
        outputs: Output port schemas
        result: Returned from run(); if callable it is called with the
            inputs, if an exception instance it is raised
        is_async: Whether run() is a coroutine function
    """

    def __init__(
        self,
        inputs: Mapping[str, Any],
        outputs: Mapping[str, Any] | None = None,
        result: Any = None,
        *,
        is_async: bool = True,
    ) -> None:
        self.inputs = dict(inputs)
        self.outputs = dict(outputs or {})
        self.result = result
        self.is_async = is_async
        self.calls: list[tuple[dict[str, Any], Any]] = []

    def _produce(self, inputs: dict[str, Any], settings: Any) -> Any:
        self.calls.append((inputs, settings))
        if isinstance(self.result, BaseException):
            raise self.result
        if callable(self.result):
            return self.result(inputs)
        return self.result

    def run(self, inputs: dict[str, Any], settings: Any) -> Any:
        if self.is_async:
            return self._run_async(inputs, settings)
        return self._produce(inputs, settings)

    async def _run_async(self, inputs: dict[str, Any], settings: Any) -> Any:
        return self._produce(inputs, settings)


class FakeResolver:
    """Resolver backed by a dict of node type -> component (or factory)."""

    def __init__(self, components: Mapping[str, Any] | None = None) -> None:
        self.components: dict[str, Any] = dict(components or {})
        self.calls: list[tuple[str, Any]] = []

    def resolve(self, node_type: str, settings: Any) -> Any:
        self.calls.append((node_type, settings))
        entry = self.components.get(node_type)
        if entry is None:
            return None
        if isinstance(entry, ComponentResolutionError):
            raise entry
        if isinstance(entry, Callable) and not hasattr(entry, "run"):  # type: ignore[arg-type]
            return entry(settings)
        return entry


class Collector:
    """Async sink recording every value it receives."""

    def __init__(self) -> None:
        self.values: list[Any] = []

    async def __call__(self, value: Any) -> None:
        self.values.append(value)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def collector() -> Collector:
    return Collector()


@pytest.fixture
def plugin_manager() -> PluginManager:
    """Plugin manager with the built-in components registered."""
    manager = PluginManager()
    manager.register_builtin_components()
    return manager


@pytest.fixture
def make_component() -> Callable[..., RecordingComponent]:
    """Factory fixture for RecordingComponent (avoids importing from conftest)."""
    return RecordingComponent


@pytest.fixture
def make_resolver() -> Callable[..., FakeResolver]:
    return FakeResolver


@pytest.fixture
def make_collector() -> Callable[[], Collector]:
    return Collector


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo configure_logging() so handlers never outlive a test's captured streams."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.WARNING)
