"""Advisory checks for decoded table schemas.

Checks report findings only. They never reject or alter a schema.
"""
from collections import defaultdict
from typing import List

from tabledef.models.finding import Finding, FindingType, Severity
from tabledef.models.schema import DataType, TableSchema

VARIABLE_LENGTH_TYPES = {DataType.VARCHAR}

def check_table_name(schema: TableSchema) -> List[Finding]:
    """Detect a blank table name."""
    if schema.table_name.strip():
        return []
    return [Finding(
        finding_type=FindingType.EMPTY_TABLE_NAME,
        severity=Severity.HIGH,
        evidence={"table": schema.table_name},
        description="Table name is empty."
    )]

def check_has_columns(schema: TableSchema) -> List[Finding]:
    """Detect a table without columns."""
    if schema.columns:
        return []
    return [Finding(
        finding_type=FindingType.NO_COLUMNS,
        severity=Severity.MEDIUM,
        evidence={"table": schema.table_name},
        description=f"Table '{schema.table_name}' declares no columns."
    )]

def check_duplicate_columns(schema: TableSchema) -> List[Finding]:
    """Detect column names declared more than once."""
    positions = defaultdict(list)
    for index, column in enumerate(schema.columns):
        positions[column.name].append(index)

    findings = []
    for name, indexes in positions.items():
        if len(indexes) > 1:
            findings.append(Finding(
                finding_type=FindingType.DUPLICATE_COLUMN,
                severity=Severity.HIGH,
                evidence={"table": schema.table_name, "column": name, "positions": indexes},
                description=(
                    f"Column '{name}' is declared {len(indexes)} times in table "
                    f"'{schema.table_name}'."
                )
            ))
    return findings

def check_lengths(schema: TableSchema) -> List[Finding]:
    """Detect lengths missing on variable-length types or set on fixed-size ones."""
    findings = []
    for column in schema.columns:
        evidence = {"table": schema.table_name, "column": column.name,
                    "data_type": column.data_type.value}
        if column.data_type in VARIABLE_LENGTH_TYPES and column.length is None:
            findings.append(Finding(
                finding_type=FindingType.MISSING_LENGTH,
                severity=Severity.MEDIUM,
                evidence=evidence,
                description=(
                    f"Column '{column.name}' is {column.data_type.value} "
                    f"but has no length."
                )
            ))
        elif column.data_type not in VARIABLE_LENGTH_TYPES and column.length is not None:
            findings.append(Finding(
                finding_type=FindingType.UNUSED_LENGTH,
                severity=Severity.LOW,
                evidence=dict(evidence, length=column.length),
                description=(
                    f"Column '{column.name}' is {column.data_type.value}; "
                    f"length {column.length} is ignored."
                )
            ))
    return findings

def check_auto_increment(schema: TableSchema) -> List[Finding]:
    """Detect auto_increment on columns that are not integers."""
    findings = []
    for column in schema.columns:
        if column.constraints.auto_increment and column.data_type != DataType.INTEGER:
            findings.append(Finding(
                finding_type=FindingType.AUTO_INCREMENT_NON_INTEGER,
                severity=Severity.MEDIUM,
                evidence={"table": schema.table_name, "column": column.name,
                          "data_type": column.data_type.value},
                description=(
                    f"Column '{column.name}' is auto_increment but its type is "
                    f"{column.data_type.value}."
                )
            ))
    return findings

def check_foreign_keys(schema: TableSchema) -> List[Finding]:
    """Detect unusual foreign key placements."""
    findings = []
    for column in schema.columns:
        fk = column.constraints.foreign_key
        if fk is None:
            continue
        evidence = {
            "table": schema.table_name,
            "column": column.name,
            "reference_table": fk.reference_table,
            "reference_column": fk.reference_column
        }
        if column.constraints.primary_key or column.constraints.auto_increment:
            findings.append(Finding(
                finding_type=FindingType.FOREIGN_KEY_ON_PRIMARY_KEY,
                severity=Severity.LOW,
                evidence=evidence,
                description=(
                    f"Column '{column.name}' is both a key/auto_increment column "
                    f"and a foreign key to {fk.reference_table}.{fk.reference_column}."
                )
            ))
        if fk.reference_table == schema.table_name and fk.reference_column == column.name:
            findings.append(Finding(
                finding_type=FindingType.SELF_REFERENCE,
                severity=Severity.MEDIUM,
                evidence=evidence,
                description=f"Column '{column.name}' references itself."
            ))
    return findings

ALL_CHECKS = [
    check_table_name,
    check_has_columns,
    check_duplicate_columns,
    check_lengths,
    check_auto_increment,
    check_foreign_keys
]

def apply_checks(schema: TableSchema) -> List[Finding]:
    """Run all advisory checks against a schema.

    Args:
        schema: Decoded table schema

    Returns:
        List of findings from all checks, in check order
    """
    all_findings = []
    for check in ALL_CHECKS:
        all_findings.extend(check(schema))
    return all_findings

def meets_threshold(findings: List[Finding], fail_on: str) -> bool:
    """Return True if any finding is at or above the ``fail_on`` severity.

    ``fail_on='NONE'`` never trips.
    """
    if fail_on.upper() == 'NONE':
        return False
    threshold = Severity(fail_on.upper()).rank
    return any(f.severity.rank >= threshold for f in findings)
