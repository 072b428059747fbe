"""
Shared test infrastructure for the template engine.

Modules:
- file_utils: Utilities for creating files in temporary directories
- contexts: Sample context values and output sinks
"""

from .file_utils import write
from .contexts import Item, Order, Record, RecordingSink, FailingSink

__all__ = [
    # File utilities
    "write",

    # Context values and sinks
    "Item", "Order", "Record", "RecordingSink", "FailingSink",
]
