"""Table schema value objects."""
from enum import Enum
from typing import Annotated, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

MAX_LENGTH = 2**32 - 1

# Unsigned 32-bit; bool and float are rejected.
Length = Annotated[StrictInt, Field(ge=0, le=MAX_LENGTH)]

class DataType(str, Enum):
    """Closed set of column data types."""

    INTEGER = "integer"
    VARCHAR = "varchar"

class ForeignKey(BaseModel):
    """Reference to a column of another table, by name only."""

    model_config = ConfigDict(frozen=True)

    reference_table: StrictStr
    reference_column: StrictStr

class ColumnConstraints(BaseModel):
    """Constraints which apply to a single column."""

    model_config = ConfigDict(frozen=True)

    primary_key: StrictBool = False
    auto_increment: StrictBool = False
    not_null: StrictBool = False
    unique: StrictBool = False
    foreign_key: Optional[ForeignKey] = None

class ColumnSchema(BaseModel):
    """Represents a column definition."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr
    data_type: DataType
    length: Optional[Length] = None
    constraints: ColumnConstraints

class TableSchema(BaseModel):
    """Represents a table definition. Column order is declaration order."""

    model_config = ConfigDict(frozen=True)

    table_name: StrictStr
    columns: Tuple[ColumnSchema, ...]
