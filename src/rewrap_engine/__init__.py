"""Structural delimiter editing: rewrap the enclosing pair or add a new one."""

__all__ = [
    "adapters",
    "api",
    "buffer",
    "engine",
    "host",
    "pairs",
    "preview",
    "runtime",
    "units",
]

__version__ = "0.1.0"
