"""Constants shared by the normalizer and the search preparation helpers."""

# Sorting

ORDER_ASC = "asc"
ORDER_DESC = "desc"
VALID_ORDERS = (ORDER_ASC, ORDER_DESC)

DEFAULT_SORT = "timestamp"
DEFAULT_ORDER = ORDER_DESC
DEFAULT_SIZE = 30

PAGING_FROM_CURSOR = -1
"""Value of ``from`` indicating cursor (``search_after``) paging."""

# Date ranges

DEFAULT_DATE_FIELD = "timestamp"
"""Date range field used when none is configured, if it is mapped."""

RANGE_CUSTOM = "custom"
RANGE_ALL_TIME = "all-time"
RANGE_LAST_7_DAYS = "last-7-days"

DATE_PRESETS = (
    "today",
    "yesterday",
    "this-month",
    "last-month",
    "last-2-months",
    "last-3-months",
    RANGE_LAST_7_DAYS,
)

ES_DATETIME_FORMAT = "yyyy-MM-dd HH:mm:ss"
"""Format of the range bounds, as declared to Elasticsearch."""

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
"""The same format, for :meth:`datetime.strftime`."""

BUCKET_LABEL_FORMAT = "%b %d, %Y"
ES_BUCKET_LABEL_FORMAT = "MMM dd, yyyy"

# Field types

TEXT = "text"
KEYWORD = "keyword"
BOOLEAN = "boolean"
IP = "ip"

SOURCE_FIELD = "src"
SOURCE_ALL = "all"

NEGATION_PREFIX = "!"
