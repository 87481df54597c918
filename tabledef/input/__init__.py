"""Input source handling and resolution."""
from tabledef.input.resolver import (
    InputFormat,
    InputResolutionError,
    detect_format,
    load_document,
    load_schema_file,
    load_schema_source,
)

__all__ = [
    'InputFormat',
    'InputResolutionError',
    'detect_format',
    'load_document',
    'load_schema_file',
    'load_schema_source',
]
