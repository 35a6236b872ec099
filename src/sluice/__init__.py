"""sluice: asynchronous dataflow graph engine.

Nodes are wired by typed connections; a node fires once every declared
input has arrived for the current cycle, then fans its results out to the
nodes downstream of it.
"""

__version__ = "0.1.0"
