"""InputGate: join barrier for a node's inputs.

A gate collects keyed values until every declared key is present, then
holds them (AWAITING_RELEASE) while the node fires. ``release()`` clears
the store, wakes writers that were blocked on the finished cycle, and
returns the gate to ACCUMULATING for the next cycle.

Back-pressure comes from suspend-on-overwrite: a second value for a key
that is already filled in the current cycle waits for release instead of
replacing the unconsumed value. No locks are needed because everything
runs on one asyncio event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

import structlog

from sluice.contracts.enums import GateState

slog = structlog.get_logger(__name__)


class InputGate:
    """Per-node join barrier with generational reset.

    Example:
        gate = InputGate(["a", "b"])

        await gate.set("a", 1)       # False - still waiting for "b"
        if await gate.set("b", 2):   # True - this delivery completed the cycle
            inputs = gate.values()   # {"a": 1, "b": 2}
            ...
            gate.release()           # ready for the next cycle
    """

    def __init__(self, fields: Iterable[str], *, owner: str | None = None) -> None:
        """Initialize gate.

        Args:
            fields: Keys that must all be set before the gate completes
            owner: Node id used in log events
        """
        self._fields: tuple[str, ...] = tuple(dict.fromkeys(fields))
        self._required = frozenset(self._fields)
        self._owner = owner
        self._values: dict[str, Any] = {}
        self._state = GateState.ACCUMULATING
        self._generation = 0
        self._released = asyncio.Event()

    @property
    def fields(self) -> tuple[str, ...]:
        """Declared keys, in declaration order."""
        return self._fields

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def generation(self) -> int:
        """Number of completed release() calls."""
        return self._generation

    @property
    def complete(self) -> bool:
        """True if every declared key holds a value in the current cycle."""
        return self._required <= self._values.keys()

    def has(self, key: str) -> bool:
        """Check if key already holds an unconsumed value this cycle."""
        return key in self._values

    def values(self) -> dict[str, Any]:
        """Snapshot of the values recorded in the current cycle."""
        return dict(self._values)

    async def set(self, key: str, value: Any) -> bool:
        """Record a value, waiting for release if the key is already filled.

        Keys outside the declared set are recorded anyway (with a warning) so
        that speculative or partially wired inputs never fail.

        Args:
            key: Input key
            value: Value to record (None is a valid value)

        Returns:
            True if this call moved the gate from ACCUMULATING to
            AWAITING_RELEASE; the caller is then responsible for firing and
            calling release(). False otherwise.
        """
        if key not in self._required:
            slog.warning(
                "gate_undeclared_key",
                node_id=self._owner,
                key=key,
                declared=list(self._fields),
            )

        # Re-check after every wake-up: another writer suspended on the same
        # key may have claimed the slot in the fresh cycle first.
        while key in self._values:
            released = self._released
            await released.wait()

        self._values[key] = value

        if self._state == GateState.ACCUMULATING and self.complete:
            self._state = GateState.AWAITING_RELEASE
            return True
        return False

    def release(self) -> None:
        """End the current cycle.

        Clears the store, wakes every coroutine waiting on this cycle and
        starts a fresh generation. Safe to call any number of times.
        """
        finished = self._released
        self._values = {}
        self._released = asyncio.Event()
        self._generation += 1
        self._state = GateState.ACCUMULATING
        finished.set()

    async def wait_released(self) -> None:
        """Wait until the cycle that is current at call time is released."""
        released = self._released
        await released.wait()

    def __repr__(self) -> str:
        return (
            f"InputGate(fields={list(self._fields)!r}, state={self._state.value!r}, "
            f"filled={sorted(self._values)!r}, generation={self._generation})"
        )
