"""Collector package for kubescout.

The boundary between the cluster and the inference engine.

Submodules
----------
normalize -- raw object dicts -> ResourceRecord and pattern pipeline inputs.
lister    -- async listing of the supported resource types via kubernetes-asyncio.
"""

from kubescout.collector.normalize import (
    MalformedResourceError,
    PatternInputs,
    extract_pattern_inputs,
    load_objects,
    normalize_object,
    normalize_objects,
)

__all__ = [
    "MalformedResourceError",
    "PatternInputs",
    "extract_pattern_inputs",
    "load_objects",
    "normalize_object",
    "normalize_objects",
]
