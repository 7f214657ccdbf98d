"""Pluggable sinks for converter output.

Import any sink you need directly from this package::

    from treon_converter.sinks import ConsoleSink, MemorySink, FileSink
"""

from __future__ import annotations

import importlib
from typing import Any

from treon_converter.sinks.base import IngestionContext, Sink
from treon_converter.sinks.callback import CallbackSink
from treon_converter.sinks.console import ConsoleSink
from treon_converter.sinks.memory import MemorySink

# FileSink is lazy-loaded; import it directly when needed:
#   from treon_converter.sinks.file import FileSink

__all__ = [
    "CallbackSink",
    "ConsoleSink",
    "IngestionContext",
    "MemorySink",
    "Sink",
]


def __getattr__(name: str) -> Any:
    """Lazy-import sinks that are not needed by the converter core."""
    _lazy = {
        "FileSink": "treon_converter.sinks.file",
    }
    if name in _lazy:
        mod = importlib.import_module(_lazy[name])
        return getattr(mod, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
