"""Validate quiz data seed integrity.

This script validates:
1. Record count matches the eligible subjects in the source file
2. Distinct category and subject counts match the source
3. Category, subject and compound indexes exist
4. The development user exists (only enforced with --expect-dev-user)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.table import Table

from scripts.seed_mongo import SeedingConfig, get_mongo_client, index_specs
from src.quiz_data import DevUser, FieldNaming, SeedError, TransformResult, flatten_source, load_source

if TYPE_CHECKING:
    from pymongo.database import Database

console = Console()


@dataclass
class ValidationResult:
    """Result of a validation check."""

    name: str
    expected: int | None
    actual: int
    passed: bool
    message: str = ""


@dataclass
class ValidationReport:
    """Complete validation report."""

    counts: list[ValidationResult] = field(default_factory=list)
    indexes: list[ValidationResult] = field(default_factory=list)
    users: list[ValidationResult] = field(default_factory=list)

    @property
    def all_passed(self) -> bool:
        """Check if all validations passed."""
        return all(r.passed for r in self.counts + self.indexes + self.users)

    @property
    def failures(self) -> list[ValidationResult]:
        """Get all failed validations."""
        return [r for r in self.counts + self.indexes + self.users if not r.passed]


def _count_check(name: str, expected: int, actual: int) -> ValidationResult:
    passed = expected == actual
    return ValidationResult(
        name=name,
        expected=expected,
        actual=actual,
        passed=passed,
        message="" if passed else f"expected {expected}, found {actual}",
    )


def validate_counts(
    db: Database,
    config: SeedingConfig,
    result: TransformResult,
) -> list[ValidationResult]:
    """Compare collection counts against the flattened source."""
    collection = db[config.quiz_collection]
    naming = config.field_naming

    return [
        _count_check("Records", result.record_count, collection.count_documents({})),
        _count_check(
            "Distinct categories",
            len(result.distinct_categories),
            len(collection.distinct(naming.category_field)),
        ),
        _count_check(
            "Distinct subjects",
            len(result.distinct_subjects),
            len(collection.distinct(naming.subject_field)),
        ),
    ]


def validate_indexes(db: Database, config: SeedingConfig) -> list[ValidationResult]:
    """Check that every expected index key pattern is present."""
    info = db[config.quiz_collection].index_information()
    existing = [
        [(name, direction) for name, direction in spec["key"]]
        for spec in info.values()
    ]
    results = []

    for keys in index_specs(config.field_naming):
        exists = list(keys) in existing
        label = ", ".join(name for name, _ in keys)
        results.append(ValidationResult(
            name=f"Index: {label}",
            expected=1,
            actual=1 if exists else 0,
            passed=exists,
            message="" if exists else f"Missing index on ({label})",
        ))
    return results


def validate_dev_user(
    db: Database,
    config: SeedingConfig,
    required: bool = False,
) -> ValidationResult:
    """Check for the development user. Only a failure when required."""
    count = db[config.users_collection].count_documents({"google_id": DevUser().google_id})
    return ValidationResult(
        name="Development user",
        expected=1 if required else None,
        actual=count,
        passed=count > 0 or not required,
        message="" if count > 0 else "Development user not found",
    )


def run_full_validation(
    config: SeedingConfig,
    expect_dev_user: bool = False,
    client: Any = None,
) -> ValidationReport:
    """Run full validation and return report.

    Raises:
        SeedError: If the source file cannot be loaded.
    """
    result = flatten_source(load_source(config.source_path))
    report = ValidationReport()

    owns_client = client is None
    if client is None:
        client = get_mongo_client(config.mongo_uri)

    try:
        db = client[config.database]
        report.counts = validate_counts(db, config, result)
        report.indexes = validate_indexes(db, config)
        report.users.append(validate_dev_user(db, config, expect_dev_user))
    finally:
        if owns_client:
            client.close()

    return report


def _add_rows(table: Table, results: list[ValidationResult]) -> None:
    for result in results:
        status = "✓" if result.passed else "✗"
        color = "green" if result.passed else "red"
        status_text = f"[{color}]{status}[/{color}]"
        if result.message:
            status_text += f" {result.message}"
        expected = "-" if result.expected is None else str(result.expected)
        table.add_row(result.name, expected, str(result.actual), status_text)


@click.command()
@click.option(
    "--source",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the nested quiz JSON file",
)
@click.option("--database", type=str, default=None, help="MongoDB database name")
@click.option("--collection", type=str, default=None, help="Quiz collection name")
@click.option(
    "--field-naming",
    type=click.Choice([n.value for n in FieldNaming]),
    default=FieldNaming.TOPIC.value,
    show_default=True,
    help="Field naming the collection was seeded with",
)
@click.option(
    "--expect-dev-user",
    is_flag=True,
    help="Fail if the development user is missing",
)
def main(
    source: Path | None,
    database: str | None,
    collection: str | None,
    field_naming: str,
    expect_dev_user: bool,
) -> None:
    """Validate quiz data seed integrity."""
    config = SeedingConfig.from_env(
        source_path=source,
        database=database,
        quiz_collection=collection,
        field_naming=FieldNaming(field_naming),
    )

    console.print("\n[bold blue]Validating seed integrity...[/bold blue]\n")

    try:
        report = run_full_validation(config, expect_dev_user)
    except SeedError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from e
    except PyMongoError as e:
        console.print(f"[red]Error:[/red] MongoDB operation failed: {e}")
        raise SystemExit(1) from e

    table = Table(title=f"{config.database}.{config.quiz_collection}")
    table.add_column("Check", style="cyan")
    table.add_column("Expected", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Status", justify="center")
    _add_rows(table, report.counts + report.indexes + report.users)

    console.print(table)
    console.print()

    if report.all_passed:
        console.print("[bold green]✓ All validations passed![/bold green]\n")
        return

    console.print("[bold yellow]⚠ Some validations failed:[/bold yellow]")
    for failure in report.failures:
        console.print(f"  - {failure.name}: {failure.message or 'Failed'}")
    console.print()
    raise SystemExit(1)


if __name__ == "__main__":
    main()
