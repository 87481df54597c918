"""Decoding and encoding between schema documents and TableSchema values."""
import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from tabledef.models.schema import TableSchema

logger = logging.getLogger(__name__)

ROOT_PATH = "document"


class SchemaDecodeError(ValueError):
    """Raised when a document cannot be decoded into a TableSchema.

    Attributes:
        path: Field path of the offending value, e.g. ``columns[2].data_type``
        message: Human readable reason
        errors: Every problem found in the document, first one included
    """

    def __init__(
        self,
        message: str,
        path: str = ROOT_PATH,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message
        self.errors = errors or []

    def with_prefix(self, prefix: str) -> "SchemaDecodeError":
        """Return a copy of this error located under ``prefix``."""
        errors = [dict(err, path=_join(prefix, err['path'])) for err in self.errors]
        return type(self)(self.message, path=_join(prefix, self.path), errors=errors)


class MalformedDocument(SchemaDecodeError):
    """Input is not a well-formed JSON or YAML document."""


class MissingField(SchemaDecodeError):
    """A required field is absent."""


class TypeMismatch(SchemaDecodeError):
    """A field is present but has the wrong shape or range."""


class UnknownVariant(SchemaDecodeError):
    """A data_type string names no known DataType."""


def decode(document: Any) -> TableSchema:
    """Decode a parsed document into a TableSchema.

    Optional constraint flags default to False, ``length`` and ``foreign_key``
    default to absent, and unknown keys are ignored.

    Args:
        document: Parsed JSON/YAML value (normally a dict)

    Returns:
        The decoded TableSchema

    Raises:
        MissingField: A required field is absent
        TypeMismatch: A field has the wrong shape
        UnknownVariant: ``data_type`` is not a known variant
    """
    try:
        return TableSchema.model_validate(document)
    except ValidationError as e:
        raise _translate(e) from e


def encode(schema: TableSchema) -> Dict[str, Any]:
    """Encode a TableSchema as a document.

    Constraint flags are always written. ``length`` and ``foreign_key`` are
    written only when present.
    """
    return schema.model_dump(mode='json', exclude_none=True)


def decode_json(text: Union[str, bytes]) -> TableSchema:
    """Parse JSON text and decode it.

    Raises:
        MalformedDocument: If the text is not valid JSON
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedDocument(f"Invalid JSON: {e}") from e
    return decode(document)


def encode_json(schema: TableSchema, indent: Optional[int] = 2) -> str:
    """Encode a TableSchema as JSON text."""
    return json.dumps(encode(schema), indent=indent)


_ERROR_CLASSES = {
    'missing': MissingField,
    'enum': UnknownVariant,
}


def _translate(error: ValidationError) -> SchemaDecodeError:
    """Map a pydantic ValidationError onto the decode error taxonomy."""
    problems = []
    for err in error.errors():
        error_cls = _classify(err)
        problems.append({
            'path': _format_loc(err['loc']),
            'kind': error_cls.__name__,
            'message': err['msg'],
        })

    first = error.errors()[0]
    error_cls = _classify(first)
    path = _format_loc(first['loc'])
    message = first['msg']
    if error_cls is UnknownVariant:
        message = f"Unknown data type {first['input']!r}"

    logger.debug("Decode failed with %d problem(s), first at %s", len(problems), path)
    return error_cls(message, path=path, errors=problems)


def _classify(err: Dict[str, Any]) -> type:
    error_cls = _ERROR_CLASSES.get(err['type'], TypeMismatch)
    # A non-string data_type is a shape problem, not an unknown name
    if error_cls is UnknownVariant and not isinstance(err.get('input'), str):
        return TypeMismatch
    return error_cls


def _format_loc(loc: Tuple[Union[str, int], ...]) -> str:
    """Format a pydantic location tuple as ``columns[2].data_type``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or ROOT_PATH


def _join(prefix: str, path: str) -> str:
    if path == ROOT_PATH:
        return prefix
    if path.startswith('['):
        return f"{prefix}{path}"
    return f"{prefix}.{path}"
