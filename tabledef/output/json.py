"""JSON/YAML output rendering for schemas and check reports."""
import json  # pylint: disable=import-self,redefined-builtin
from typing import List, Optional, Tuple

import yaml

from tabledef.core.checks import meets_threshold
from tabledef.core.codec import encode
from tabledef.models.finding import Finding
from tabledef.models.schema import TableSchema

def render_json(
    reports: List[Tuple[TableSchema, List[Finding]]],
    fail_on: str = "HIGH"
) -> str:
    """Render check reports for one or more tables as JSON string."""
    tables = []
    for schema, findings in reports:
        tables.append({
            "table_name": schema.table_name,
            "column_count": len(schema.columns),
            "findings": [f.model_dump(mode='json') for f in findings],
            "passed": not meets_threshold(findings, fail_on),
        })
    return json.dumps({
        "tables": tables,
        "passed": all(t["passed"] for t in tables),
    }, indent=2)

def render_document(
    schemas: List[TableSchema],
    fmt: str = 'json',
    indent: Optional[int] = 2,
    as_list: bool = False
) -> str:
    """Render encoded schema documents as JSON or YAML.

    A single schema is written as one object, several as a list. With
    ``as_list`` the output is always a list, even for one schema.
    """
    documents = [encode(s) for s in schemas]
    payload = documents[0] if len(documents) == 1 and not as_list else documents
    if fmt == 'yaml':
        return yaml.safe_dump(payload, sort_keys=False, indent=indent or 2)
    return json.dumps(payload, indent=indent)
