"""Domain classes for the query normalizer."""

from .base import FieldProperty, FieldMapping, SearchDefaults, asdict
from .request import (
    QueryValue,
    DateBounds,
    DateRange,
    Options,
    Errors,
    BoolClauses,
    NormalizedRequest,
)
