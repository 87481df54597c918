"""Tests for schema document decoding and encoding."""
import json

import pytest
from pydantic import ValidationError

from tabledef.core.codec import (
    MalformedDocument,
    MissingField,
    SchemaDecodeError,
    TypeMismatch,
    UnknownVariant,
    decode,
    decode_json,
    encode,
    encode_json,
)
from tabledef.models.schema import (
    ColumnConstraints,
    ColumnSchema,
    DataType,
    ForeignKey,
    TableSchema,
)

SAMPLE = {
    "table_name": "employees",
    "columns": [
        {
            "name": "employee_id",
            "data_type": "integer",
            "constraints": {"primary_key": True, "auto_increment": True}
        },
        {
            "name": "department_id",
            "data_type": "integer",
            "constraints": {
                "foreign_key": {"reference_table": "departments", "reference_column": "id"}
            }
        }
    ]
}


def _column(**overrides):
    column = {"name": "c", "data_type": "varchar", "length": 10, "constraints": {}}
    column.update(overrides)
    return column


def _table(*columns):
    return {"table_name": "t", "columns": list(columns)}


def test_decode_sample_scenario():
    """Test decoding the two-column employees scenario."""
    schema = decode(SAMPLE)

    assert schema.table_name == "employees"
    assert len(schema.columns) == 2
    assert schema.columns[0].constraints == ColumnConstraints(
        primary_key=True, auto_increment=True
    )
    assert schema.columns[0].constraints.not_null is False
    assert schema.columns[0].constraints.unique is False
    assert schema.columns[0].constraints.foreign_key is None

    second = schema.columns[1].constraints
    assert not (second.primary_key or second.auto_increment or second.not_null or second.unique)
    assert second.foreign_key == ForeignKey(reference_table="departments", reference_column="id")


def test_decode_full_employees_document(employees_document):
    """Test decoding the five-column employees document."""
    schema = decode(employees_document)

    assert schema.table_name == "employees"
    assert len(schema.columns) == 5
    assert schema.columns[0] == ColumnSchema(
        name="employee_id",
        data_type=DataType.INTEGER,
        length=None,
        constraints=ColumnConstraints(primary_key=True, auto_increment=True)
    )
    assert schema.columns[1] == ColumnSchema(
        name="first_name",
        data_type=DataType.VARCHAR,
        length=50,
        constraints=ColumnConstraints(not_null=True)
    )
    assert schema.columns[2].name == "last_name"
    assert schema.columns[2].length == 50
    assert schema.columns[3] == ColumnSchema(
        name="email",
        data_type=DataType.VARCHAR,
        length=100,
        constraints=ColumnConstraints(not_null=True, unique=True)
    )
    assert schema.columns[4] == ColumnSchema(
        name="department_id",
        data_type=DataType.INTEGER,
        constraints=ColumnConstraints(
            foreign_key=ForeignKey(reference_table="departments", reference_column="id")
        )
    )


def test_decode_fills_constraint_defaults():
    """Test omitted constraint flags decode as False and foreign_key as absent."""
    schema = decode(_table(_column(constraints={})))
    constraints = schema.columns[0].constraints

    assert constraints.primary_key is False
    assert constraints.auto_increment is False
    assert constraints.not_null is False
    assert constraints.unique is False
    assert constraints.foreign_key is None


@pytest.mark.parametrize("text,expected", [
    ("integer", DataType.INTEGER),
    ("varchar", DataType.VARCHAR),
])
def test_decode_known_data_types(text, expected):
    """Test each data_type string maps to its variant."""
    schema = decode(_table(_column(data_type=text)))
    assert schema.columns[0].data_type is expected


@pytest.mark.parametrize("text", ["text", "Integer", "VARCHAR", ""])
def test_decode_unknown_data_type(text):
    """Test unrecognized data_type strings fail as UnknownVariant."""
    with pytest.raises(UnknownVariant) as exc_info:
        decode(_table(_column(data_type=text)))

    assert exc_info.value.path == "columns[0].data_type"
    assert repr(text) in str(exc_info.value)


def test_decode_non_string_data_type_is_type_mismatch():
    """Test a numeric data_type is a shape error, not an unknown variant."""
    with pytest.raises(TypeMismatch):
        decode(_table(_column(data_type=5)))


def test_decode_preserves_column_order():
    """Test columns keep declaration order."""
    document = _table(_column(name="c"), _column(name="a"), _column(name="b"))
    schema = decode(document)
    assert [c.name for c in schema.columns] == ["c", "a", "b"]


def test_decode_length_optional():
    """Test length is absent when omitted and present when given."""
    without = _column()
    del without["length"]
    schema = decode(_table(without, _column(length=50)))

    assert schema.columns[0].length is None
    assert schema.columns[1].length == 50


def test_decode_length_zero_is_valid():
    """Test zero is an acceptable length."""
    assert decode(_table(_column(length=0))).columns[0].length == 0


def test_decode_length_upper_bound():
    """Test the largest unsigned 32-bit length is accepted."""
    assert decode(_table(_column(length=2**32 - 1))).columns[0].length == 4294967295


@pytest.mark.parametrize("length", [-5, "fifty", "50", 50.5, True, [50], 2**32, 10**20])
def test_decode_invalid_length(length):
    """Test bad lengths fail as TypeMismatch instead of being coerced."""
    with pytest.raises(TypeMismatch) as exc_info:
        decode(_table(_column(length=length)))
    assert exc_info.value.path == "columns[0].length"


@pytest.mark.parametrize("document,path", [
    ({"columns": []}, "table_name"),
    ({"table_name": "t"}, "columns"),
    (_table({"data_type": "integer", "constraints": {}}), "columns[0].name"),
    (_table({"name": "c", "constraints": {}}), "columns[0].data_type"),
    (_table({"name": "c", "data_type": "integer"}), "columns[0].constraints"),
    (
        _table(_column(constraints={"foreign_key": {"reference_table": "d"}})),
        "columns[0].constraints.foreign_key.reference_column"
    ),
    (
        _table(_column(constraints={"foreign_key": {"reference_column": "id"}})),
        "columns[0].constraints.foreign_key.reference_table"
    ),
])
def test_decode_missing_required_field(document, path):
    """Test each required field reports MissingField with its path."""
    with pytest.raises(MissingField) as exc_info:
        decode(document)
    assert exc_info.value.path == path


def test_decode_missing_field_in_later_column():
    """Test the path identifies the offending column index."""
    document = _table(_column(name="a"), _column(name="b"), {"name": "c", "constraints": {}})
    with pytest.raises(MissingField) as exc_info:
        decode(document)
    assert exc_info.value.path == "columns[2].data_type"


@pytest.mark.parametrize("document,path", [
    ([], "document"),
    ("employees", "document"),
    ({"table_name": 42, "columns": []}, "table_name"),
    ({"table_name": "t", "columns": "id"}, "columns"),
    (_table(_column(constraints={"primary_key": "yes"})), "columns[0].constraints.primary_key"),
    (_table(_column(constraints={"unique": 1})), "columns[0].constraints.unique"),
    (_table(_column(constraints=[])), "columns[0].constraints"),
    (_table(_column(constraints={"foreign_key": "departments.id"})),
     "columns[0].constraints.foreign_key"),
])
def test_decode_type_mismatch(document, path):
    """Test wrong shapes report TypeMismatch with their path."""
    with pytest.raises(TypeMismatch) as exc_info:
        decode(document)
    assert exc_info.value.path == path


def test_decode_reports_all_problems():
    """Test every problem is listed on the raised error."""
    document = _table(_column(length=-1), {"name": "b", "data_type": "text", "constraints": {}})
    with pytest.raises(SchemaDecodeError) as exc_info:
        decode(document)

    paths = {problem["path"] for problem in exc_info.value.errors}
    assert paths == {"columns[0].length", "columns[1].data_type"}
    kinds = {problem["kind"] for problem in exc_info.value.errors}
    assert kinds == {"TypeMismatch", "UnknownVariant"}


def test_decode_ignores_unknown_fields():
    """Test extra keys at every level are ignored."""
    document = {
        "table_name": "t",
        "comment": "extra",
        "columns": [
            {
                "name": "id",
                "data_type": "integer",
                "default": 0,
                "constraints": {
                    "check": "id > 0",
                    "foreign_key": {
                        "reference_table": "r",
                        "reference_column": "id",
                        "on_delete": "cascade"
                    }
                }
            }
        ]
    }
    schema = decode(document)
    assert schema.columns[0].name == "id"
    assert "comment" not in encode(schema)


def test_decode_is_permissive_about_structure(column_factory):
    """Test empty tables, duplicate names, and key+fk columns all decode."""
    assert decode({"table_name": "t", "columns": []}).columns == ()

    duplicate = decode(_table(_column(name="x"), _column(name="x")))
    assert [c.name for c in duplicate.columns] == ["x", "x"]

    mixed = decode(_table(_column(
        data_type="integer",
        constraints={
            "primary_key": True,
            "auto_increment": True,
            "foreign_key": {"reference_table": "other", "reference_column": "id"}
        }
    )))
    assert mixed.columns[0].constraints.primary_key is True
    assert mixed.columns[0].constraints.foreign_key is not None


def test_encode_writes_flags_explicitly():
    """Test encode writes every flag and omits absent optionals."""
    document = encode(decode(SAMPLE))
    first, second = document["columns"]

    assert first == {
        "name": "employee_id",
        "data_type": "integer",
        "constraints": {
            "primary_key": True,
            "auto_increment": True,
            "not_null": False,
            "unique": False
        }
    }
    assert "length" not in second
    assert second["constraints"]["foreign_key"] == {
        "reference_table": "departments",
        "reference_column": "id"
    }


def test_encode_writes_length_when_present(column_factory, table_factory):
    """Test length appears in the document only when set."""
    table = table_factory(columns=[
        column_factory(name="a", length=20),
        column_factory(name="b", data_type=DataType.INTEGER, length=None),
    ])
    columns = encode(table)["columns"]
    assert columns[0]["length"] == 20
    assert "length" not in columns[1]


def test_round_trip_model(column_factory, table_factory):
    """Test decode(encode(x)) == x."""
    table = table_factory(table_name="orders", columns=[
        column_factory(name="id", data_type=DataType.INTEGER, length=None,
                       primary_key=True, auto_increment=True),
        column_factory(name="code", length=12, not_null=True, unique=True),
        column_factory(name="customer_id", data_type=DataType.INTEGER, length=None,
                       foreign_key=("customers", "id")),
        column_factory(name="note", length=0),
    ])
    assert decode(encode(table)) == table
    assert decode(encode(table_factory(columns=[]))) == table_factory(columns=[])


def test_round_trip_document(employees_document):
    """Test encode(decode(d)) keeps the content of d with defaults filled."""
    document = encode(decode(employees_document))

    assert document["table_name"] == employees_document["table_name"]
    for original, encoded in zip(employees_document["columns"], document["columns"]):
        assert encoded["name"] == original["name"]
        assert encoded["data_type"] == original["data_type"]
        assert encoded.get("length") == original.get("length")
        for flag in ("primary_key", "auto_increment", "not_null", "unique"):
            assert encoded["constraints"][flag] == original["constraints"].get(flag, False)
        assert encoded["constraints"].get("foreign_key") == original["constraints"].get("foreign_key")


def test_decode_json_and_encode_json(employees_document):
    """Test JSON text helpers."""
    schema = decode_json(json.dumps(employees_document))
    assert schema == decode(employees_document)
    assert decode_json(encode_json(schema)) == schema
    assert encode_json(schema, indent=None).startswith('{"table_name": "employees"')


@pytest.mark.parametrize("text", [
    "", "{", "{'table_name': 't'}", "not json", b'{"table_name": "\xff\xfe"}',
])
def test_decode_json_malformed(text):
    """Test invalid JSON text fails as MalformedDocument."""
    with pytest.raises(MalformedDocument) as exc_info:
        decode_json(text)
    assert exc_info.value.path == "document"
    assert isinstance(exc_info.value, ValueError)


def test_schema_values_are_immutable():
    """Test decoded values cannot be mutated."""
    schema = decode(SAMPLE)
    with pytest.raises(ValidationError):
        schema.table_name = "other"
    with pytest.raises(ValidationError):
        schema.columns[0].constraints.unique = True


def test_schema_values_compare_structurally():
    """Test equal documents decode to equal, hashable values."""
    first = decode(SAMPLE)
    second = decode(json.loads(json.dumps(SAMPLE)))
    assert first == second
    assert hash(first) == hash(second)
    assert first != decode(dict(SAMPLE, table_name="other"))


def test_programmatic_construction_matches_decode():
    """Test models built directly equal the decoded equivalent."""
    built = TableSchema(
        table_name="employees",
        columns=[
            ColumnSchema(
                name="employee_id",
                data_type=DataType.INTEGER,
                constraints=ColumnConstraints(primary_key=True, auto_increment=True)
            ),
            ColumnSchema(
                name="department_id",
                data_type=DataType.INTEGER,
                constraints=ColumnConstraints(
                    foreign_key=ForeignKey(reference_table="departments", reference_column="id")
                )
            ),
        ]
    )
    assert built == decode(SAMPLE)


def test_error_with_prefix():
    """Test relocating an error under a list index."""
    with pytest.raises(MissingField) as exc_info:
        decode(_table({"name": "c", "constraints": {}}))

    moved = exc_info.value.with_prefix("[3]")
    assert isinstance(moved, MissingField)
    assert moved.path == "[3].columns[0].data_type"
    assert moved.errors[0]["path"] == "[3].columns[0].data_type"

    root = MalformedDocument("bad").with_prefix("[1]")
    assert root.path == "[1]"
