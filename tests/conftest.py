"""Common test fixtures."""
# pylint: disable=redefined-outer-name,too-many-arguments,too-many-positional-arguments
import json
from pathlib import Path
import pytest
from tabledef.models.schema import (
    ColumnConstraints, ColumnSchema, DataType, ForeignKey, TableSchema
)
from tabledef.models.finding import Finding, FindingType, Severity

@pytest.fixture
def fixtures_dir():
    """Fixture for the directory containing test data files."""
    return Path(__file__).parent / "fixtures"

@pytest.fixture
def employees_document(fixtures_dir):
    """The five-column employees sample document."""
    return json.loads((fixtures_dir / "employees.json").read_text(encoding="utf-8"))

@pytest.fixture
def column_factory():
    """Factory to create ColumnSchema instances for testing."""
    def _make_column(
        name="test_col",
        data_type=DataType.VARCHAR,
        length=50,
        primary_key=False,
        auto_increment=False,
        not_null=False,
        unique=False,
        foreign_key=None
    ):
        if isinstance(foreign_key, tuple):
            foreign_key = ForeignKey(
                reference_table=foreign_key[0], reference_column=foreign_key[1]
            )
        return ColumnSchema(
            name=name,
            data_type=data_type,
            length=length,
            constraints=ColumnConstraints(
                primary_key=primary_key,
                auto_increment=auto_increment,
                not_null=not_null,
                unique=unique,
                foreign_key=foreign_key
            )
        )
    return _make_column

@pytest.fixture
def table_factory(column_factory):
    """Factory to create TableSchema instances for testing."""
    def _make_table(table_name="test_table", columns=None):
        if columns is None:
            columns = [column_factory()]
        return TableSchema(table_name=table_name, columns=columns)
    return _make_table

@pytest.fixture
def finding_factory():
    """Factory to create Finding instances for testing."""
    def _make_finding(
        finding_type=FindingType.DUPLICATE_COLUMN,
        severity=Severity.HIGH,
        evidence=None,
        description="Test finding"
    ):
        if evidence is None:
            evidence = {"table": "T", "column": "C"}
        return Finding(
            finding_type=finding_type,
            severity=severity,
            evidence=evidence,
            description=description
        )
    return _make_finding
