"""Markdown output rendering for schema check reports."""
from typing import List

from tabledef.models.finding import Finding
from tabledef.models.schema import TableSchema

_SEVERITY_EMOJI = {"HIGH": "🔴", "MEDIUM": "🟡", "LOW": "🟢"}

def render_markdown(schema: TableSchema, findings: List[Finding]) -> str:
    """Render a table schema and its findings as a Markdown report."""
    lines = [
        f"# Schema Check: {schema.table_name}",
        "",
        "| # | Column | Type | Length | PK | AI | Not Null | Unique | References |",
        "|---|--------|------|--------|----|----|----------|--------|------------|",
    ]

    for index, col in enumerate(schema.columns):
        c = col.constraints
        fk = c.foreign_key
        lines.append(
            f"| {index} | {col.name} | {col.data_type.value} | "
            f"{col.length if col.length is not None else ''} | "
            f"{_flag(c.primary_key)} | {_flag(c.auto_increment)} | "
            f"{_flag(c.not_null)} | {_flag(c.unique)} | "
            f"{f'{fk.reference_table}.{fk.reference_column}' if fk else ''} |"
        )

    lines.extend([
        "",
        "## Findings",
        ""
    ])

    if not findings:
        lines.append("No findings.")
    else:
        # HIGH first
        for finding in sorted(findings, key=lambda f: -f.severity.rank):
            emoji = _SEVERITY_EMOJI.get(finding.severity.value, "")
            lines.append(f"### {emoji} {finding.finding_type.value}")
            lines.append(f"- **Severity:** {finding.severity.value}")
            lines.append(f"- **Description:** {finding.description}")
            lines.append(f"- **Evidence:** `{finding.evidence}`")
            lines.append("")

    return "\n".join(lines)

def _flag(value: bool) -> str:
    return "✔" if value else ""
