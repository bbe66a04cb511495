"""Generate a sorted list of public top-level domains from remote listings."""

__version__ = "0.3.0"
