"""Data models for quiz data seeding.

Field naming:
- TOPIC (canonical): documents carry ``topic`` / ``subtopic``, which is what
  the quiz backend queries.
- CATEGORY (legacy): documents carry ``category`` / ``subject``, kept for
  consumers of the older loader.

The same naming drives record fields, index keys, and report projections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class FieldNaming(str, Enum):
    """Output field names used for the category/subject pair."""

    TOPIC = "topic"
    CATEGORY = "category"

    @property
    def category_field(self) -> str:
        """Field holding the top-level category name."""
        return "topic" if self is FieldNaming.TOPIC else "category"

    @property
    def subject_field(self) -> str:
        """Field holding the subject name within a category."""
        return "subtopic" if self is FieldNaming.TOPIC else "subject"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class QuizRecord:
    """A flattened quiz document: one category/subject pair and its keywords."""

    category: str
    subject: str
    keywords: list[str]
    style_modifiers: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_document(self, naming: FieldNaming = FieldNaming.TOPIC) -> dict[str, Any]:
        """Serialize to a MongoDB document using the given field naming."""
        return {
            naming.category_field: self.category,
            naming.subject_field: self.subject,
            "keywords": list(self.keywords),
            "style_modifiers": list(self.style_modifiers),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class DevUser:
    """Fixed identity inserted for local development logins."""

    google_id: str = "dev-user-local"
    email: str = "dev@localhost"
    name: str = "Local Developer"
    email_verified: bool = True
    exp: int = 0
    questions_count: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        """Serialize to a MongoDB document."""
        return {
            "google_id": self.google_id,
            "email": self.email,
            "name": self.name,
            "email_verified": self.email_verified,
            "exp": self.exp,
            "questions_count": self.questions_count,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
