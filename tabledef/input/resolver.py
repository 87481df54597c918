"""Input source detection and schema document loading."""
import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from tabledef.core.codec import MalformedDocument, SchemaDecodeError, decode
from tabledef.models.schema import TableSchema
from tabledef.sql.ddl_parser import parse_ddl_to_schema

logger = logging.getLogger(__name__)


class InputFormat(Enum):
    """Formats of schema input files."""

    JSON = "json"   # JSON schema documents
    YAML = "yaml"   # YAML schema documents
    SQL = "sql"     # SQL DDL files (CREATE TABLE)


_EXTENSIONS = {
    '.json': InputFormat.JSON,
    '.yaml': InputFormat.YAML,
    '.yml': InputFormat.YAML,
    '.sql': InputFormat.SQL,
}


class InputResolutionError(ValueError):
    """Raised when an input file cannot be found or its format is unsupported."""


def detect_format(path: str) -> InputFormat:
    """Detect the format of an input file from its extension.

    Args:
        path: File path

    Returns:
        Detected InputFormat

    Raises:
        InputResolutionError: If the extension is not supported
    """
    suffix = Path(path).suffix.lower()
    input_format = _EXTENSIONS.get(suffix)
    if input_format is None:
        raise InputResolutionError(
            f"Unsupported input format: {path}. "
            f"Supported extensions: {', '.join(sorted(_EXTENSIONS))}"
        )
    logger.debug("Detected format %s for %s", input_format.value, path)
    return input_format


def load_document(path: str) -> Any:
    """Read and parse a JSON or YAML document.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        The parsed document (dict, list, or scalar)

    Raises:
        InputResolutionError: If the file is missing, unreadable, or not JSON/YAML
        MalformedDocument: If the file content does not parse
    """
    input_format = detect_format(path)
    if input_format == InputFormat.SQL:
        raise InputResolutionError(
            f"SQL files hold DDL, not schema documents: {path}"
        )

    text = _read_text(path)
    try:
        if input_format == InputFormat.JSON:
            return json.loads(text)
        return yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Invalid JSON in {path}: {e}") from e
    except yaml.YAMLError as e:
        raise MalformedDocument(f"Invalid YAML in {path}: {e}") from e


def load_schema_file(path: str, dialect: Optional[str] = None) -> List[TableSchema]:
    """Load every table schema held in a file.

    JSON/YAML files may hold one schema document or a list of them. SQL files
    are imported from their CREATE TABLE statements.

    Args:
        path: Input file path
        dialect: SQL dialect for .sql files (default: mysql)

    Returns:
        List of decoded TableSchema objects, in file order

    Raises:
        InputResolutionError: If the file cannot be resolved
        SchemaDecodeError: If a document fails to decode
    """
    schemas, _ = load_schema_source(path, dialect=dialect)
    return schemas


def load_schema_source(
    path: str,
    dialect: Optional[str] = None
) -> Tuple[List[TableSchema], bool]:
    """Load table schemas along with the shape of the source.

    Returns:
        (schemas, is_list). ``is_list`` is True when the file held a list of
        documents or was SQL DDL, False for a single schema document.
    """
    if detect_format(path) == InputFormat.SQL:
        return parse_ddl_to_schema(_read_text(path), dialect=dialect or 'mysql'), True

    document = load_document(path)
    if not isinstance(document, list):
        return [decode(document)], False

    schemas = []
    for index, item in enumerate(document):
        try:
            schemas.append(decode(item))
        except SchemaDecodeError as e:
            raise e.with_prefix(f"[{index}]") from e
    logger.info("Loaded %d table schema(s) from %s", len(schemas), path)
    return schemas, True


def _read_text(path: str) -> str:
    if not os.path.exists(path):
        raise InputResolutionError(f"Input file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"Invalid UTF-8 in {path}: {e}") from e
    except OSError as e:
        raise InputResolutionError(f"Error reading input file: {path}\n{e}") from e
