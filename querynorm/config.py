"""
Application configuration.

Every setting can be overridden by an environment variable of the same name.
When the normalizer is used inside a Flask application, the same keys are
read from the application config (see :mod:`querynorm.context`).
"""
import os

LOGLEVEL = int(os.environ.get("LOGLEVEL", "20"))
"""Numeric log level (20 is INFO)."""

LOGFILE = os.environ.get("LOGFILE", None)
"""If set, log records are written to this file instead of stderr."""

TIMEZONE = os.environ.get("TIMEZONE", "UTC")
"""
Timezone in which date presets are computed, and which is passed to
Elasticsearch as the ``time_zone`` of the date range.
"""

DATE_RANGE_FIELD = os.environ.get("DATE_RANGE_FIELD", None)
"""
The date field that ``range``, ``start`` and ``end`` apply to. If set, it
must be mapped. If not set, ``timestamp`` is used when the mapping has it;
otherwise requests get no date range.
"""

TIEBREAKER_FIELD = os.environ.get("TIEBREAKER_FIELD", "_id")
"""
Secondary sort field with unique values. Keeps ``search_after`` paging stable
when the primary sort field has duplicate values.

Elasticsearch 8 disables fielddata on ``_id``, so sorting on it fails unless
``indices.id_field_data.enabled`` is turned on. Against such clusters, set
this to a mapped ``keyword`` field with unique values.
"""

DEFAULT_SORT = os.environ.get("DEFAULT_SORT", "timestamp")
"""Sort field used when the request does not provide a valid one."""

DEFAULT_ORDER = os.environ.get("DEFAULT_ORDER", "desc")
"""Sort order used when the request does not provide a valid one."""

DEFAULT_SIZE = int(os.environ.get("DEFAULT_SIZE", "30"))
"""Page size used when the request does not provide a valid one."""

QUERYNORM_MAPPING = os.environ.get("QUERYNORM_MAPPING", None)
"""Path to an Elasticsearch mapping document (JSON)."""

QUERYNORM_DOC_TYPE = os.environ.get("QUERYNORM_DOC_TYPE", None)
"""
Document type to read from a legacy (typed) mapping document. Ignored for
typeless mappings.
"""
