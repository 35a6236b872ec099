"""Runtime: input gates and node runners."""

from sluice.engine.gate import InputGate
from sluice.engine.runner import FanOutTable, NodeRunner, Sink

__all__ = [
    "FanOutTable",
    "InputGate",
    "NodeRunner",
    "Sink",
]
