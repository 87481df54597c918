"""Schema check finding models and classifications."""
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

class FindingType(str, Enum):
    """Types of advisory schema findings."""

    EMPTY_TABLE_NAME = "EMPTY_TABLE_NAME"
    NO_COLUMNS = "NO_COLUMNS"
    DUPLICATE_COLUMN = "DUPLICATE_COLUMN"
    MISSING_LENGTH = "MISSING_LENGTH"
    UNUSED_LENGTH = "UNUSED_LENGTH"
    AUTO_INCREMENT_NON_INTEGER = "AUTO_INCREMENT_NON_INTEGER"
    FOREIGN_KEY_ON_PRIMARY_KEY = "FOREIGN_KEY_ON_PRIMARY_KEY"
    SELF_REFERENCE = "SELF_REFERENCE"

class Severity(str, Enum):
    """Severity levels for findings."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        """Numeric rank, higher is more severe."""
        return ["LOW", "MEDIUM", "HIGH"].index(self.value)

class Finding(BaseModel):
    """Represents a single advisory finding about a table schema."""

    finding_type: FindingType
    severity: Severity
    evidence: Dict[str, Any]
    description: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "finding_type": "DUPLICATE_COLUMN",
                "severity": "HIGH",
                "evidence": {"table": "employees", "column": "email", "positions": [3, 5]},
                "description": "Column 'email' is declared 2 times in table 'employees'."
            }
        }
    )
