# tests/property/test_gate_properties.py
"""Property-based tests for input gate and node runner cycles.

GATE INVARIANTS:
1. A cycle completes exactly once, on the delivery of its last missing key
2. Every delivered value is consumed by exactly one firing
3. Every firing sees one value for every declared key
"""

from __future__ import annotations

import asyncio
from typing import Any

from hypothesis import given
from hypothesis import strategies as st

from sluice.contracts.enums import GateState
from sluice.engine.gate import InputGate
from sluice.engine.runner import NodeRunner

port_names = st.lists(
    st.text(alphabet="abcdefghij", min_size=1, max_size=4),
    min_size=1,
    max_size=5,
    unique=True,
)


class _Recorder:
    def __init__(self, ports: list[str]) -> None:
        self.inputs = {port: {"type": "any"} for port in ports}
        self.outputs: dict[str, Any] = {}
        self.fired: list[dict[str, Any]] = []

    async def run(self, inputs: dict[str, Any], settings: Any) -> None:
        self.fired.append(inputs)


@given(ports=port_names, data=st.data())
def test_permutation_completes_once_on_last_key(ports: list[str], data: st.DataObject) -> None:
    order = data.draw(st.permutations(ports))

    async def scenario() -> list[bool]:
        gate = InputGate(ports)
        results = [await gate.set(key, i) for i, key in enumerate(order)]
        assert gate.state == GateState.AWAITING_RELEASE
        assert gate.values() == {key: i for i, key in enumerate(order)}
        return results

    results = asyncio.run(scenario())

    assert results == [False] * (len(order) - 1) + [True]


@given(ports=port_names, cycles=st.integers(min_value=1, max_value=4), data=st.data())
def test_every_value_consumed_exactly_once(ports: list[str], cycles: int, data: st.DataObject) -> None:
    deliveries = [(port, cycle) for port in ports for cycle in range(cycles)]
    shuffled = data.draw(st.permutations(deliveries))
    # Number each port's values in delivery order
    schedule: list[tuple[str, int]] = []
    cursors = dict.fromkeys(ports, 0)
    for port, _ in shuffled:
        schedule.append((port, cursors[port]))
        cursors[port] += 1

    component = _Recorder(ports)

    async def scenario() -> None:
        runner = NodeRunner("node", component)
        await asyncio.gather(*(runner.input(port, value) for port, value in schedule))
        assert runner.gate.generation == cycles
        assert runner.gate.state == GateState.ACCUMULATING

    asyncio.run(scenario())

    assert len(component.fired) == cycles
    for fired in component.fired:
        assert set(fired) == set(ports)
    for port in ports:
        assert sorted(fired[port] for fired in component.fired) == list(range(cycles))
