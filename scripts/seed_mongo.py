"""Seed MongoDB with flattened quiz data.

This script seeds MongoDB with:
1. Quiz records flattened from the nested category -> subject source file
2. Indexes on category, subject, and (category, subject)
3. A fixed development user (optional, best-effort)

The load runs validate-then-commit: the source is parsed and flattened
before the destination collection is touched, so a bad file or an empty
result never wipes existing data.

Usage:
    python scripts/seed_mongo.py --source data/sample-data.json
    python scripts/seed_mongo.py --field-naming category --no-dev-user
    python scripts/seed_mongo.py --dry-run -v
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from dotenv import load_dotenv
from pymongo import ASCENDING
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from src.quiz_data import (
    DevUser,
    EmptyTransformError,
    FieldNaming,
    SeedError,
    SourceLoadError,
    TransformResult,
    flatten_source,
    load_source,
)

if TYPE_CHECKING:
    from pymongo import MongoClient
    from pymongo.collection import Collection
    from pymongo.database import Database

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE = "quizdb"
DEFAULT_QUIZ_COLLECTION = "quiz_data"
DEFAULT_USERS_COLLECTION = "users"
DEFAULT_SOURCE_PATH = Path(__file__).parent.parent / "data" / "sample-data.json"

SOURCE_HINT = "Make sure to copy it first, or pass --source / set QUIZ_SOURCE_PATH"


@dataclass
class SeedingConfig:
    """Configuration for quiz data seeding.

    Carries the target database and collections explicitly instead of
    relying on a client-level "current database".
    """

    source_path: Path = field(default_factory=lambda: DEFAULT_SOURCE_PATH)
    mongo_uri: str = DEFAULT_MONGO_URI
    database: str = DEFAULT_DATABASE
    quiz_collection: str = DEFAULT_QUIZ_COLLECTION
    users_collection: str = DEFAULT_USERS_COLLECTION
    field_naming: FieldNaming = FieldNaming.TOPIC
    create_dev_user: bool = True
    dry_run: bool = False
    verbose: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> SeedingConfig:
        """Build config from environment (and .env), then apply non-None overrides."""
        load_dotenv()

        values: dict[str, Any] = {
            "source_path": Path(os.getenv("QUIZ_SOURCE_PATH", str(DEFAULT_SOURCE_PATH))),
            "mongo_uri": os.getenv("MONGO_URI", DEFAULT_MONGO_URI),
            "database": os.getenv("MONGO_DB", DEFAULT_DATABASE),
            "quiz_collection": os.getenv("QUIZ_COLLECTION", DEFAULT_QUIZ_COLLECTION),
            "users_collection": os.getenv("USERS_COLLECTION", DEFAULT_USERS_COLLECTION),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class SeedingReport:
    """Verification figures read back from the destination collection."""

    total_records: int = 0
    distinct_categories: int = 0
    distinct_subjects: int = 0
    per_category: dict[str, int] = field(default_factory=dict)
    sample: dict[str, Any] | None = None
    skipped_subjects: int = 0


@dataclass
class SeedingStats:
    """Statistics from seeding operations."""

    deleted: int = 0
    inserted: int = 0
    indexes: list[str] = field(default_factory=list)
    dev_user_created: bool = False
    report: SeedingReport = field(default_factory=SeedingReport)


def get_mongo_client(uri: str) -> MongoClient:
    """Create a MongoDB client. One client is used for the whole run."""
    from pymongo import MongoClient

    return MongoClient(uri)


def index_specs(naming: FieldNaming) -> list[list[tuple[str, int]]]:
    """Return the key patterns for the category, subject and compound indexes."""
    return [
        [(naming.category_field, ASCENDING)],
        [(naming.subject_field, ASCENDING)],
        [(naming.category_field, ASCENDING), (naming.subject_field, ASCENDING)],
    ]


def prepare_records(source_path: Path) -> TransformResult:
    """Load and flatten the source file, failing before any write happens.

    Raises:
        SourceLoadError: If the source cannot be read or parsed.
        EmptyTransformError: If no subject carries a keyword list.
    """
    data = load_source(source_path)
    result = flatten_source(data)

    for category, subject in result.skipped_subjects:
        logger.debug(f"Skipped {category}/{subject}: no keywords list")

    if result.record_count == 0:
        raise EmptyTransformError(
            f"No documents to insert: none of {result.subject_count} subjects "
            f"in {source_path} has a keywords list"
        )
    return result


def clear_collection(collection: Collection) -> int:
    """Delete every document in the collection. Returns the deleted count."""
    return collection.delete_many({}).deleted_count


def insert_records(
    collection: Collection,
    result: TransformResult,
    naming: FieldNaming,
) -> int:
    """Insert all records in one batch. Returns the inserted count."""
    documents = [record.to_document(naming) for record in result.records]
    insert_result = collection.insert_many(documents)
    return len(insert_result.inserted_ids)


def create_indexes(collection: Collection, naming: FieldNaming) -> list[str]:
    """Create the lookup indexes. Re-creating an existing index is a no-op."""
    return [collection.create_index(keys) for keys in index_specs(naming)]


def create_dev_user(users: Collection) -> bool:
    """Insert the development user if it is not there yet.

    Best-effort: database errors are logged and swallowed.

    Returns:
        True if a user document was inserted.
    """
    user = DevUser()
    try:
        if users.find_one({"google_id": user.google_id}) is not None:
            logger.info(f"Development user already exists: {user.email}")
            return False
        users.insert_one(user.to_document())
    except PyMongoError as e:
        logger.warning(f"Failed to create test user: {e}")
        return False
    return True


def build_report(
    collection: Collection,
    naming: FieldNaming,
    skipped_subjects: int = 0,
) -> SeedingReport:
    """Read verification figures back from the collection."""
    categories = collection.distinct(naming.category_field)
    per_category = {
        category: collection.count_documents({naming.category_field: category})
        for category in categories
    }
    return SeedingReport(
        total_records=collection.count_documents({}),
        distinct_categories=len(categories),
        distinct_subjects=len(collection.distinct(naming.subject_field)),
        per_category=per_category,
        sample=collection.find_one(),
        skipped_subjects=skipped_subjects,
    )


def seed_quiz_data(
    db: Database,
    config: SeedingConfig,
    result: TransformResult,
) -> SeedingStats:
    """Replace the quiz collection with the transformed records."""
    stats = SeedingStats()
    naming = config.field_naming
    quiz = db[config.quiz_collection]

    stats.deleted = clear_collection(quiz)
    stats.inserted = insert_records(quiz, result, naming)
    stats.indexes = create_indexes(quiz, naming)

    if config.create_dev_user:
        stats.dev_user_created = create_dev_user(db[config.users_collection])

    stats.report = build_report(quiz, naming, result.skipped_count)
    return stats


def seed_all(config: SeedingConfig, client: MongoClient | None = None) -> SeedingStats:
    """Execute the full seeding pipeline.

    Args:
        config: Seeding configuration.
        client: Optional pre-built client; one is created from config otherwise.

    Raises:
        SeedError: On an unreadable source or an empty transform.
    """
    result = prepare_records(config.source_path)

    owns_client = client is None
    if client is None:
        client = get_mongo_client(config.mongo_uri)

    try:
        return seed_quiz_data(client[config.database], config, result)
    finally:
        if owns_client:
            client.close()


# =============================================================================
# CLI Interface
# =============================================================================

def _display_transform(result: TransformResult) -> None:
    """Display per-category transform summary."""
    table = Table(title="Transformed Records")
    table.add_column("Category", style="cyan")
    table.add_column("Records", justify="right")

    for category, count in result.records_per_category().items():
        table.add_row(category, str(count))

    console.print(table)
    console.print(
        f"  {result.record_count} records from {result.category_count} categories, "
        f"{result.subject_count} subjects ({result.skipped_count} skipped)"
    )


def _display_report(report: SeedingReport) -> None:
    """Display verification report."""
    console.print("\n[bold]=== Verification ===[/bold]")
    console.print(f"Total documents: {report.total_records}")
    console.print(f"Total categories: {report.distinct_categories}")
    console.print(f"Total subjects: {report.distinct_subjects}")
    if report.skipped_subjects:
        console.print(
            f"[yellow]Skipped subjects without keywords: {report.skipped_subjects}[/yellow]"
        )

    table = Table(title="Categories in database")
    table.add_column("Category", style="cyan")
    table.add_column("Subjects", justify="right")
    for category, count in report.per_category.items():
        table.add_row(str(category), str(count))
    console.print(table)

    console.print("\nSample document:")
    console.print(report.sample)


def _run_seed(config: SeedingConfig) -> SeedingStats:
    """Run the pipeline step by step with progress output."""
    naming = config.field_naming

    with Progress(console=console) as progress:
        task = progress.add_task("[green]Seeding...", total=5)

        result = prepare_records(config.source_path)
        console.print(f"  ✓ Loaded {config.source_path.name}: {result.record_count} records")
        progress.update(task, advance=1)

        client = get_mongo_client(config.mongo_uri)
        try:
            db = client[config.database]
            quiz = db[config.quiz_collection]
            stats = SeedingStats()

            stats.deleted = clear_collection(quiz)
            console.print(f"  ✓ Deleted {stats.deleted} existing documents")
            progress.update(task, advance=1)

            stats.inserted = insert_records(quiz, result, naming)
            console.print(f"  ✓ Inserted {stats.inserted} documents")
            progress.update(task, advance=1)

            stats.indexes = create_indexes(quiz, naming)
            console.print(f"  ✓ Indexes created: {', '.join(stats.indexes)}")
            progress.update(task, advance=1)

            if config.create_dev_user:
                stats.dev_user_created = create_dev_user(db[config.users_collection])
                if stats.dev_user_created:
                    console.print(f"  ✓ Test user created with email: {DevUser().email}")
            progress.update(task, advance=1)

            stats.report = build_report(quiz, naming, result.skipped_count)
        finally:
            client.close()

    return stats


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
    help="Output field names: topic/subtopic or legacy category/subject",
)
@click.option(
    "--dev-user/--no-dev-user",
    default=True,
    help="Create the local development user",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Transform only, without connecting to MongoDB",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
def main(
    source: Path | None,
    database: str | None,
    collection: str | None,
    field_naming: str,
    dev_user: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Seed MongoDB with flattened quiz data."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

    config = SeedingConfig.from_env(
        source_path=source,
        database=database,
        quiz_collection=collection,
        field_naming=FieldNaming(field_naming),
        create_dev_user=dev_user,
        dry_run=dry_run,
        verbose=verbose,
    )

    console.print("\n[bold blue]=== Starting Quiz Data Load ===[/bold blue]\n")

    try:
        if config.dry_run:
            result = prepare_records(config.source_path)
            _display_transform(result)
            console.print("\n[bold cyan]DRY RUN - MongoDB was not modified[/bold cyan]")
            return

        stats = _run_seed(config)
    except SourceLoadError as e:
        console.print(f"[red]ERROR:[/red] Could not load {e.source_path}: {e}")
        console.print(SOURCE_HINT)
        raise SystemExit(1) from e
    except SeedError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        raise SystemExit(1) from e
    except PyMongoError as e:
        console.print(f"[red]ERROR:[/red] MongoDB operation failed: {e}")
        raise SystemExit(1) from e

    _display_report(stats.report)
    console.print("\n[bold green]=== Data Load Complete! ===[/bold green]")


if __name__ == "__main__":
    main()
