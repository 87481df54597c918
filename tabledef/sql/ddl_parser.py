"""DDL (Data Definition Language) import of CREATE TABLE statements."""
import logging
from typing import Any, Dict, List, Optional, Tuple

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from tabledef.models.schema import (
    ColumnConstraints,
    ColumnSchema,
    DataType,
    ForeignKey,
    TableSchema,
)

logger = logging.getLogger(__name__)

_SQL_TYPES = {
    exp.DataType.Type.INT: DataType.INTEGER,
    exp.DataType.Type.UINT: DataType.INTEGER,
    exp.DataType.Type.VARCHAR: DataType.VARCHAR,
}

_AUTO_INCREMENT_KINDS = (
    exp.AutoIncrementColumnConstraint,
    exp.GeneratedAsIdentityColumnConstraint,
)


def parse_ddl_to_schema(ddl_sql: str, dialect: str = 'mysql') -> List[TableSchema]:
    """Parse CREATE TABLE statements into schema objects.

    Supports inline column constraints (PRIMARY KEY, AUTO_INCREMENT, NOT NULL,
    UNIQUE, REFERENCES) and table-level PRIMARY KEY, UNIQUE and FOREIGN KEY
    clauses. Columns whose type is not INT/INTEGER or VARCHAR are skipped.

    Gracefully handles unsupported statements by logging and skipping them.
    Never raises; returns an empty list if the SQL does not parse.

    Args:
        ddl_sql: DDL SQL text (one or more statements)
        dialect: SQL dialect for parsing (default: 'mysql')

    Returns:
        List of TableSchema objects, in statement order.
    """
    try:
        statements = sqlglot.parse(ddl_sql, read=dialect)
    except SqlglotError as e:
        logger.warning("DDL parsing failed: %s", e)
        return []

    schemas = []
    for stmt in statements:
        if not stmt:
            continue

        if isinstance(stmt, exp.Create) and str(stmt.args.get('kind', '')).upper() == 'TABLE':
            schema_obj = _handle_create_table(stmt)
            if schema_obj:
                schemas.append(schema_obj)
        else:
            logger.debug("Skipping unsupported statement type: %s", type(stmt).__name__)

    return schemas


def _handle_create_table(stmt: exp.Create) -> Optional[TableSchema]:
    """Extract TableSchema from a CREATE TABLE statement."""
    # CREATE TABLE has 'this' which is a Schema wrapping the Table
    schema_def = stmt.this
    if not isinstance(schema_def, exp.Schema):
        logger.debug("No column definitions in CREATE TABLE (CREATE ... AS?)")
        return None

    table = schema_def.this
    if not isinstance(table, exp.Table) or not table.name:
        logger.debug("No table name found in CREATE TABLE")
        return None
    table_name = table.name

    columns: List[Dict[str, Any]] = []
    for expr in schema_def.expressions:
        if isinstance(expr, exp.ColumnDef):
            col = _extract_column(expr, table_name)
            if col:
                columns.append(col)
        else:
            _apply_table_constraint(expr, columns, table_name)

    if not columns:
        logger.warning("CREATE TABLE %s has no supported columns", table_name)

    return TableSchema(
        table_name=table_name,
        columns=[
            ColumnSchema(
                name=col['name'],
                data_type=col['data_type'],
                length=col['length'],
                constraints=ColumnConstraints(**col['constraints'])
            )
            for col in columns
        ]
    )


def _extract_column(col_expr: exp.ColumnDef, table_name: str) -> Optional[Dict[str, Any]]:
    """Extract column fields from a ColumnDef expression.

    Returns:
        Dict of column fields, or None if the column type is unsupported
    """
    col_name = col_expr.name
    kind = col_expr.args.get('kind')
    if not col_name or kind is None:
        logger.warning("Skipping untyped column %r in %s", col_name, table_name)
        return None

    data_type = _SQL_TYPES.get(kind.this)
    if data_type is None:
        logger.warning(
            "Skipping column %s.%s: unsupported type %s",
            table_name, col_name, kind.sql()
        )
        return None

    length = _extract_length(kind) if data_type == DataType.VARCHAR else None
    flags: Dict[str, Any] = {}

    for constraint in col_expr.constraints:
        ckind = constraint.kind if isinstance(constraint, exp.ColumnConstraint) else constraint
        if isinstance(ckind, exp.PrimaryKeyColumnConstraint):
            flags['primary_key'] = True
        elif isinstance(ckind, _AUTO_INCREMENT_KINDS):
            flags['auto_increment'] = True
        elif isinstance(ckind, exp.NotNullColumnConstraint):
            # An explicit NULL parses as NotNull with allow_null set
            if not ckind.args.get('allow_null'):
                flags['not_null'] = True
        elif isinstance(ckind, exp.UniqueColumnConstraint):
            flags['unique'] = True
        elif isinstance(ckind, exp.Reference):
            target = _reference_target(ckind)
            if target and len(target[1]) == 1:
                flags['foreign_key'] = ForeignKey(
                    reference_table=target[0], reference_column=target[1][0]
                )
            else:
                logger.warning(
                    "Skipping reference on %s.%s: expected exactly one referenced column",
                    table_name, col_name
                )

    return {'name': col_name, 'data_type': data_type, 'length': length, 'constraints': flags}


def _extract_length(kind: exp.DataType) -> Optional[int]:
    """Return the declared length of a VARCHAR(n) type, if any."""
    if not kind.expressions:
        return None
    param = kind.expressions[0]
    literal = param.this if isinstance(param, exp.DataTypeParam) else param
    try:
        return int(literal.name)
    except (AttributeError, ValueError):
        logger.warning("Ignoring non-numeric length %s", param.sql())
        return None


def _apply_table_constraint(
    expr: exp.Expression,
    columns: List[Dict[str, Any]],
    table_name: str
) -> None:
    """Apply a table-level constraint to the matching columns."""
    if isinstance(expr, exp.Constraint):
        # CONSTRAINT name PRIMARY KEY (...) / FOREIGN KEY (...)
        for inner in expr.expressions:
            _apply_table_constraint(inner, columns, table_name)

    elif isinstance(expr, exp.PrimaryKey):
        for name in _names(expr.expressions):
            _set_flag(columns, name, 'primary_key', True, table_name)

    elif isinstance(expr, exp.UniqueColumnConstraint):
        target = expr.this
        names = _names(target.expressions) if isinstance(target, exp.Schema) else []
        if len(names) == 1:
            _set_flag(columns, names[0], 'unique', True, table_name)
        else:
            logger.warning("Skipping composite UNIQUE on %s: %s", table_name, names)

    elif isinstance(expr, exp.ForeignKey):
        local = _names(expr.expressions)
        reference = expr.args.get('reference')
        target = _reference_target(reference) if reference else None
        if not target or len(target[1]) != len(local):
            logger.warning("Skipping unresolvable FOREIGN KEY on %s", table_name)
            return
        ref_table, ref_columns = target
        for name, ref_column in zip(local, ref_columns):
            fk = ForeignKey(reference_table=ref_table, reference_column=ref_column)
            _set_flag(columns, name, 'foreign_key', fk, table_name)

    else:
        logger.debug("Skipping table-level clause: %s", type(expr).__name__)


def _reference_target(reference: exp.Reference) -> Optional[Tuple[str, List[str]]]:
    """Return (table, columns) named by a REFERENCES clause."""
    target = reference.this
    columns: List[str] = []
    if isinstance(target, exp.Schema):
        columns = _names(target.expressions)
        target = target.this
    if not isinstance(target, exp.Table):
        return None
    return target.name, columns


def _names(expressions: List[exp.Expression]) -> List[str]:
    names = []
    for e in expressions:
        ident = e.find(exp.Identifier)
        names.append(ident.name if ident else e.name)
    return names


def _set_flag(
    columns: List[Dict[str, Any]],
    name: str,
    flag: str,
    value: Any,
    table_name: str
) -> None:
    matched = False
    for col in columns:
        if col['name'] == name:
            col['constraints'][flag] = value
            matched = True
    if not matched:
        logger.warning("Constraint names unknown column %s.%s", table_name, name)
