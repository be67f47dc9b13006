"""Per-line number sums computed by a worker process over a memory-mapped file."""

__version__ = "0.1.0"
__all__ = ["shared", "child", "parent"]