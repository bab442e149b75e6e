"""Core modules for linkgraph."""

__all__ = [
    "backend",
    "canonical",
    "edge",
    "exceptions",
    "expressions",
    "graph",
    "indices",
    "node",
    "queries",
    "registration",
    "sets",
]
