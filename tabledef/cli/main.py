"""Command-line interface for tabledef - table schema documents."""
import argparse
import logging
import sys
from typing import Any, Dict

from tabledef.config.settings import (
    FAIL_ON_CHOICES,
    SUPPORTED_DIALECTS,
    ConfigError,
    load_cli_config,
    validate_cli_config,
)
from tabledef.core.checks import apply_checks, meets_threshold
from tabledef.core.codec import SchemaDecodeError
from tabledef.input.resolver import (
    InputResolutionError,
    load_schema_file,
    load_schema_source,
)
from tabledef.output.json import render_document, render_json
from tabledef.output.markdown import render_markdown

logger = logging.getLogger(__name__)


def run_validate(args, config: Dict[str, Any]) -> int:
    """Decode a schema file, run advisory checks and print the report."""
    schemas = load_schema_file(args.path, dialect=config['dialect'])
    if not schemas:
        print(f"Error: No table schemas found in {args.path}", file=sys.stderr)
        return 1

    fail_on = (args.fail_on or config['fail_on']).upper()
    reports = [(schema, apply_checks(schema)) for schema in schemas]
    for schema, findings in reports:
        logger.info("%s: %d finding(s)", schema.table_name, len(findings))

    if args.format == "markdown":
        print("\n\n".join(render_markdown(s, f) for s, f in reports))
    else:
        print(render_json(reports, fail_on=fail_on))

    return _exit_code(fail_on, reports)


def run_normalize(args, config: Dict[str, Any]) -> int:
    """Print the canonical encoding of a schema file, keeping its object or list shape."""
    schemas, as_list = load_schema_source(args.path, dialect=config['dialect'])
    indent = args.indent if args.indent is not None else config['indent']
    print(render_document(schemas, fmt=args.to, indent=indent, as_list=as_list))
    return 0


def run_from_ddl(args, config: Dict[str, Any]) -> int:
    """Import CREATE TABLE statements and print them as schema documents."""
    if not args.path.lower().endswith('.sql'):
        print(f"Error: Expected a .sql file, got {args.path}", file=sys.stderr)
        return 1

    dialect = args.dialect or config['dialect']
    schemas = load_schema_file(args.path, dialect=dialect)
    if not schemas:
        print(
            f"Error: No CREATE TABLE statements found in {args.path} "
            f"(dialect: {dialect})",
            file=sys.stderr
        )
        return 1

    print(render_document(schemas, fmt=args.to, indent=config['indent'], as_list=True))
    return 0


def _exit_code(fail_on, reports):
    if any(meets_threshold(findings, fail_on) for _, findings in reports):
        return 1
    return 0


def _report_error(error: Exception) -> None:
    """Print an error and, for decode errors, every problem found."""
    print(f"Error: {error}", file=sys.stderr)
    if isinstance(error, SchemaDecodeError) and len(error.errors) > 1:
        for problem in error.errors:
            print(
                f"  - {problem['path']}: {problem['message']} ({problem['kind']})",
                file=sys.stderr
            )


COMMANDS = {
    "validate": run_validate,
    "normalize": run_normalize,
    "from-ddl": run_from_ddl,
}


def main():
    """Parse command line arguments and execute appropriate command."""
    parser = argparse.ArgumentParser(
        description="tabledef - decode, check and normalize table schema documents",
        epilog="Examples:\n"
               "  tabledef validate employees.json\n"
               "  tabledef normalize employees.yaml --to json\n"
               "  tabledef from-ddl schema.sql --dialect postgres",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--config",
        help="Path to config file (default: ~/.tabledef/config.yaml)"
    )
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Decode a schema document and run advisory checks",
        description="Decode a schema file (JSON, YAML or SQL) and report findings"
    )
    validate_parser.add_argument("path", help="Schema file (.json, .yaml, .yml or .sql)")
    validate_parser.add_argument(
        "--format", choices=["json", "markdown"], default="json",
        help="Report format (default: json)"
    )
    validate_parser.add_argument(
        "--fail-on", choices=FAIL_ON_CHOICES, default=None,
        help="Exit with code 1 if a finding meets or exceeds this severity "
             "(default: from config, HIGH)"
    )

    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Print the canonical encoding of a schema document",
        description="Decode a schema file and print it re-encoded with all defaults written"
    )
    normalize_parser.add_argument("path", help="Schema file (.json, .yaml, .yml or .sql)")
    normalize_parser.add_argument(
        "--to", choices=["json", "yaml"], default="json",
        help="Output document format (default: json)"
    )
    normalize_parser.add_argument(
        "--indent", type=int, default=None,
        help="Indentation width (default: from config, 2)"
    )

    ddl_parser = subparsers.add_parser(
        "from-ddl",
        help="Convert CREATE TABLE statements to schema documents",
        description="Import CREATE TABLE statements from a .sql file"
    )
    ddl_parser.add_argument("path", help="SQL file containing CREATE TABLE statements")
    ddl_parser.add_argument(
        "--dialect", choices=SUPPORTED_DIALECTS, default=None,
        help="SQL dialect for parsing (default: from config, mysql)"
    )
    ddl_parser.add_argument(
        "--to", choices=["json", "yaml"], default="json",
        help="Output document format (default: json)"
    )

    args = parser.parse_args()

    if args.command not in COMMANDS:
        parser.print_help()
        sys.exit(1)

    try:
        config = validate_cli_config(load_cli_config(args.config))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=config['log_level'],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        code = COMMANDS[args.command](args, config)
    except (SchemaDecodeError, InputResolutionError) as e:
        _report_error(e)
        code = 1

    sys.exit(code)

if __name__ == "__main__":
    main()
