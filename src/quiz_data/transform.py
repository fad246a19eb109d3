"""Read and flatten the nested quiz source document.

Source shape::

    {
        "<category>": {
            "<subject>": {"keywords": [...], "style_modifiers": [...]},
        },
    }

Only subjects whose ``keywords`` is a list produce a record. Everything else
is skipped without error and counted in ``TransformResult.skipped_subjects``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .exceptions import SourceLoadError
from .models import QuizRecord, utc_now

logger = logging.getLogger(__name__)

KEYWORDS_KEY = "keywords"
STYLE_MODIFIERS_KEY = "style_modifiers"


@dataclass
class TransformResult:
    """Records produced from one source document, in source order."""

    records: list[QuizRecord] = field(default_factory=list)
    category_count: int = 0
    subject_count: int = 0
    skipped_subjects: list[tuple[str, str]] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_subjects)

    @property
    def distinct_categories(self) -> set[str]:
        return {r.category for r in self.records}

    @property
    def distinct_subjects(self) -> set[str]:
        return {r.subject for r in self.records}

    def records_per_category(self) -> dict[str, int]:
        """Count produced records per category, in first-seen order."""
        counts: dict[str, int] = {}
        for record in self.records:
            counts[record.category] = counts.get(record.category, 0) + 1
        return counts


def parse_source(raw: str, source_path: Path | None = None) -> dict[str, Any]:
    """Parse raw JSON text into the category mapping.

    Raises:
        SourceLoadError: If the text is not valid JSON or not a JSON object.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SourceLoadError(f"Invalid JSON: {e}", source_path) from e

    if not isinstance(data, dict):
        raise SourceLoadError(
            f"Expected a JSON object at top level, got {type(data).__name__}",
            source_path,
        )
    return data


def load_source(source_path: Path) -> dict[str, Any]:
    """Read and parse the source file.

    Raises:
        SourceLoadError: If the file is missing, unreadable, or not valid JSON.
    """
    try:
        raw = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceLoadError(f"Could not read file: {e}", source_path) from e

    return parse_source(raw, source_path)


def flatten_source(
    data: dict[str, Any],
    now: datetime | None = None,
) -> TransformResult:
    """Flatten category -> subject -> content into quiz records.

    Args:
        data: Parsed source mapping.
        now: Timestamp stamped on every record (defaults to current UTC time).

    Returns:
        TransformResult with records in source iteration order.
    """
    stamp = now or utc_now()
    result = TransformResult()

    for category, subjects in data.items():
        result.category_count += 1
        if not isinstance(subjects, dict):
            logger.debug(f"Category {category!r} is not a mapping, skipping")
            continue

        for subject, content in subjects.items():
            result.subject_count += 1
            record = _build_record(category, subject, content, stamp)
            if record is None:
                result.skipped_subjects.append((category, subject))
                continue
            result.records.append(record)

    return result


def _build_record(
    category: str,
    subject: str,
    content: Any,
    stamp: datetime,
) -> QuizRecord | None:
    """Build one record, or None when the content has no keyword list."""
    if not isinstance(content, dict):
        return None

    keywords = content.get(KEYWORDS_KEY)
    if not isinstance(keywords, list):
        return None

    style_modifiers = content.get(STYLE_MODIFIERS_KEY)
    if not isinstance(style_modifiers, list):
        style_modifiers = []

    return QuizRecord(
        category=category,
        subject=subject,
        keywords=keywords,
        style_modifiers=style_modifiers,
        created_at=stamp,
        updated_at=stamp,
    )
