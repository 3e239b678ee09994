"""okc-relay: local connection relay between a CLI process and its companion app.

The package keeps the same separation the relay is reasoned about with:
- frame codec vs. per-connection protocol handlers
- one termination decision, taken once, observable by the accept loop
- small, testable units around plain sockets and threads
"""

__all__ = []
