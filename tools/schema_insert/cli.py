"""CLI interface for the schema-driven CSV to INSERT generator."""

import sys
from pathlib import Path
from typing import Optional

import click

from shared.cli import create_table, error, handle_errors, info, print_table, success, warning
from shared.logger import setup_logger

from .converter import ConversionError, ConversionResult, InsertGenerator
from .store import SchemaStore


def display_columns(result: ConversionResult) -> None:
    """
    Show the columns extracted from the schema.

    Args:
        result: Conversion result
    """
    table = create_table(title="Extracted Column Array")
    table.add_column("Column Name", style="bold")
    table.add_column("Type", style="blue")

    for column in result.schema.columns:
        table.add_row(column.name, column.type.value)

    print_table(table)


@click.command()
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--schema", "-s", "schema_text", help="CREATE TABLE statement")
@click.option(
    "--schema-file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File containing the CREATE TABLE statement",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output SQL file (print to stdout if not specified)",
)
@click.option("--show-columns", "-c", is_flag=True, help="Show the extracted column array")
@click.option("--no-save", is_flag=True, help="Don't remember the schema for the next run")
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Where the last schema is stored (default: $CSV2INSERT_STATE_DIR or ~/.config/csv2insert)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@handle_errors
def main(
    csv_file: Path,
    schema_text: Optional[str],
    schema_file: Optional[Path],
    output: Optional[Path],
    show_columns: bool,
    no_save: bool,
    state_dir: Optional[Path],
    verbose: bool,
):
    """
    CSV to INSERT - Generate a batch INSERT from a table schema and a CSV.

    Column types come from the CREATE TABLE statement; the CSV header
    decides the column order. The schema is remembered, so later runs can
    leave it out.

    Examples:

        \b
        # Inline schema
        csv2insert users.csv --schema "CREATE TABLE users (id serial, name text);"

        \b
        # Schema from a file, SQL to a file
        csv2insert users.csv --schema-file users.sql --output inserts.sql

        \b
        # Reuse the last schema and show the parsed columns
        csv2insert more_users.csv --show-columns
    """
    # Setup logging
    log_level = "DEBUG" if verbose else "INFO"
    setup_logger(__name__, level=log_level)

    store = SchemaStore(state_dir)

    if schema_text is None and schema_file is not None:
        schema_text = schema_file.read_text(encoding="utf-8")

    if schema_text is None:
        schema_text = store.load()
        if schema_text:
            info("Using the last saved schema")

    if schema_text and not no_save:
        store.save(schema_text)

    generator = InsertGenerator()

    try:
        result = generator.convert_file(schema_text or "", csv_file, output_path=output)

    except ConversionError as e:
        error(str(e))
        sys.exit(1)

    except Exception as e:
        error(f"Error processing CSV file: {e}")
        if verbose:
            raise
        sys.exit(1)

    if result.schema.table_name:
        info(f"Extracted table name: {result.schema.table_name}")
    else:
        warning(f"No table name found in schema, using {result.table_name}")

    if show_columns:
        display_columns(result)

    # Print to stdout if no output file
    if not output:
        print(result.sql)

    success(f"Generated INSERT for {result.row_count} row(s)")

    if output:
        info(f"SQL written to: {output}")

    sys.exit(0)


if __name__ == "__main__":
    main()
