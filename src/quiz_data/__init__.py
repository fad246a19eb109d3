"""Quiz data models and source flattening."""

from .exceptions import EmptyTransformError, SeedError, SourceLoadError
from .models import DevUser, FieldNaming, QuizRecord, utc_now
from .transform import TransformResult, flatten_source, load_source, parse_source

__all__ = [
    "DevUser",
    "EmptyTransformError",
    "FieldNaming",
    "QuizRecord",
    "SeedError",
    "SourceLoadError",
    "TransformResult",
    "flatten_source",
    "load_source",
    "parse_source",
    "utc_now",
]
