"""Validation and normalization of search request parameters."""

from querynorm.domain import (
    FieldMapping,
    FieldProperty,
    NormalizedRequest,
    SearchDefaults,
)
from querynorm.exceptions import ConfigurationError, MappingError
from querynorm.process.clauses import build_bool_clauses, to_query
from querynorm.process.dates import build_daily_buckets, resolve_date_preset
from querynorm.process.normalize import QueryNormalizer, normalize

__all__ = (
    "FieldMapping",
    "FieldProperty",
    "NormalizedRequest",
    "SearchDefaults",
    "ConfigurationError",
    "MappingError",
    "QueryNormalizer",
    "normalize",
    "resolve_date_preset",
    "build_daily_buckets",
    "build_bool_clauses",
    "to_query",
)
