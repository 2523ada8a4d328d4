"""
Normalization of raw search request parameters.

The primary entrypoint is :meth:`QueryNormalizer.normalize`, which turns an
untrusted mapping of request parameters (e.g. ``request.args``) into a
:class:`.NormalizedRequest`. Malformed values never raise: each one is
replaced by its default and flagged in :attr:`.NormalizedRequest.errors`.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytz
from flask import Flask
from werkzeug.datastructures import MultiDict

from querynorm import config, consts
from querynorm.context import get_application_config
from querynorm.domain import (
    DateRange,
    Errors,
    FieldMapping,
    NormalizedRequest,
    Options,
    QueryValue,
    SearchDefaults,
)
from querynorm.exceptions import ConfigurationError
from querynorm.logging import getLogger, log_default
from querynorm.process import dates
from querynorm.services.mapping import load_mapping

logger = getLogger(__name__)

FILTER_KEYS = ("range", "start", "end", "sort", "order", "size")


def _get(raw: Mapping[str, Any], key: str) -> Any:
    """Get a single value; the first one, if several were given."""
    if isinstance(raw, MultiDict):
        return raw.get(key)
    value = raw.get(key)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _getlist(raw: Mapping[str, Any], key: str) -> List[Any]:
    """Get all values given for ``key``."""
    if isinstance(raw, MultiDict):
        return raw.getlist(key)
    value = raw.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def project_fields(raw: Mapping[str, Any],
                   mapping: FieldMapping) -> Dict[str, QueryValue]:
    """
    Copy the requested values of mapped fields, dropping empty ones.

    Empty strings count as absent. A field given more than once keeps a list
    of its non-empty values. ``src=all`` means "any source" and is dropped.
    """
    query: Dict[str, QueryValue] = {}
    for key in raw:
        if key not in mapping:
            continue
        values = [value for value in _getlist(raw, key) if value]
        if not values:
            continue
        query[key] = values[0] if len(values) == 1 else values

    if query.get(consts.SOURCE_FIELD) == consts.SOURCE_ALL:
        query.pop(consts.SOURCE_FIELD)
    return query


def parse_size(value: Any) -> Optional[int]:
    """Parse a page size; ``None`` unless it is a positive integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    value = str(value).strip()
    if not (value.isascii() and value.isdigit()):
        return None
    size = int(value)
    return size if size > 0 else None


def parse_search_after(raw: Mapping[str, Any]) -> Optional[List[Any]]:
    """Parse the ``search_after`` cursor into its ordered components."""
    values = _getlist(raw, "search_after")
    if not values or not any(values):
        return None
    if len(values) == 1 and isinstance(values[0], str):
        return values[0].split(",")
    return values


class QueryNormalizer:
    """
    Validates and defaults search request parameters against a mapping.

    Instances hold only read-only configuration, so one instance can serve
    any number of requests.

    Parameters
    ----------
    mapping : :class:`.FieldMapping`
        The fields that may be queried and sorted on.
    defaults : :class:`.SearchDefaults`
        Fallbacks for ``sort``, ``order`` and ``size``.
    timezone : str
        Name of the timezone for date presets and the date range filter.
    date_field : str
        The field that the date range applies to. If not given,
        ``timestamp`` is used when it is mapped; otherwise the date
        parameters are ignored.
    tiebreaker : str
        Unique field used as the secondary sort key.

    """

    def __init__(self, mapping: FieldMapping,
                 defaults: Optional[SearchDefaults] = None,
                 timezone: str = "UTC",
                 date_field: Optional[str] = None,
                 tiebreaker: str = "_id") -> None:
        self.mapping = mapping
        self.defaults = defaults or SearchDefaults()
        if not mapping.is_sortable(self.defaults.sort):
            raise ConfigurationError(
                f"Default sort field is not mapped: {self.defaults.sort}"
            )
        if self.defaults.order not in consts.VALID_ORDERS:
            raise ConfigurationError(
                f"Invalid default order: {self.defaults.order}"
            )
        if parse_size(self.defaults.size) is None:
            raise ConfigurationError(
                f"Invalid default size: {self.defaults.size}"
            )
        try:
            self.tz = pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError as ex:
            raise ConfigurationError(f"Unknown timezone: {timezone}") from ex
        if not date_field:
            date_field = (consts.DEFAULT_DATE_FIELD
                          if consts.DEFAULT_DATE_FIELD in mapping else None)
        elif date_field not in mapping:
            raise ConfigurationError(f"Date field is not mapped: {date_field}")
        self.timezone = timezone
        self.date_field = date_field
        self.tiebreaker = tiebreaker

    @classmethod
    def init_app(cls, app: Flask) -> None:
        """Set default configuration parameters for an application instance."""
        app.config.setdefault("TIMEZONE", config.TIMEZONE)
        app.config.setdefault("DATE_RANGE_FIELD", config.DATE_RANGE_FIELD)
        app.config.setdefault("TIEBREAKER_FIELD", config.TIEBREAKER_FIELD)
        app.config.setdefault("DEFAULT_SORT", config.DEFAULT_SORT)
        app.config.setdefault("DEFAULT_ORDER", config.DEFAULT_ORDER)
        app.config.setdefault("DEFAULT_SIZE", config.DEFAULT_SIZE)
        app.config.setdefault("QUERYNORM_MAPPING", config.QUERYNORM_MAPPING)
        app.config.setdefault("QUERYNORM_DOC_TYPE", config.QUERYNORM_DOC_TYPE)

    @classmethod
    def from_config(cls, app: Optional[Flask] = None,
                    mapping: Optional[FieldMapping] = None
                    ) -> "QueryNormalizer":
        """
        Create a normalizer from the application config (or environment).

        If ``mapping`` is not given, it is loaded from the document named by
        ``QUERYNORM_MAPPING``.
        """
        settings = get_application_config(app)
        if mapping is None:
            path = settings.get("QUERYNORM_MAPPING")
            if not path:
                raise ConfigurationError("QUERYNORM_MAPPING is not set")
            mapping = load_mapping(path, settings.get("QUERYNORM_DOC_TYPE"))
        size = parse_size(settings.get("DEFAULT_SIZE", config.DEFAULT_SIZE))
        if size is None:
            raise ConfigurationError("DEFAULT_SIZE must be a positive integer")
        defaults = SearchDefaults(
            sort=settings.get("DEFAULT_SORT", config.DEFAULT_SORT),
            order=settings.get("DEFAULT_ORDER", config.DEFAULT_ORDER),
            size=size,
        )
        return cls(
            mapping,
            defaults,
            timezone=settings.get("TIMEZONE", config.TIMEZONE),
            date_field=settings.get("DATE_RANGE_FIELD",
                                    config.DATE_RANGE_FIELD),
            tiebreaker=settings.get("TIEBREAKER_FIELD",
                                    config.TIEBREAKER_FIELD),
        )

    def normalize(self, raw: Mapping[str, Any],
                  now: Optional[datetime] = None) -> NormalizedRequest:
        """
        Normalize raw request parameters.

        Parameters
        ----------
        raw : dict or :class:`MultiDict`
            Request parameters, e.g. ``request.args``.
        now : :class:`datetime`
            The current time, for relative date presets. Defaults to the
            system clock in the configured timezone.

        Returns
        -------
        :class:`.NormalizedRequest`

        """
        if now is None:
            now = datetime.now(tz=self.tz)

        query = project_fields(raw, self.mapping)
        range_name, start, end = self._resolve_range(raw, now)
        date_range, start, end, invalid_start, invalid_end = \
            self._parse_bounds(start, end, now)
        sort, invalid_sort = self._validate_sort(_get(raw, "sort"))
        order, invalid_order = self._validate_order(_get(raw, "order"))
        size, invalid_size = self._validate_size(_get(raw, "size"))

        effective = dict(zip(
            FILTER_KEYS, (range_name, start, end, sort, order, size)
        ))
        filters = {key: value for key, value in effective.items() if value}

        errors = Errors(
            invalid_start=invalid_start,
            invalid_end=invalid_end,
            invalid_sort=invalid_sort,
            invalid_order=invalid_order,
            invalid_size=invalid_size,
        )
        return NormalizedRequest(
            query=query,
            date_range=date_range,
            filters=filters,
            options=self._assemble_options(
                sort, order, size, parse_search_after(raw)
            ),
            errors=errors,
        )

    def _resolve_range(self, raw: Mapping[str, Any], now: datetime
                       ) -> Tuple[str, Optional[str], Optional[str]]:
        range_name = _get(raw, "range") or consts.RANGE_ALL_TIME
        if self.date_field is None:
            if range_name != consts.RANGE_ALL_TIME:
                logger.debug("No date field; ignoring range %r", range_name)
            return range_name, None, None
        if range_name == consts.RANGE_CUSTOM:
            return range_name, _get(raw, "start"), _get(raw, "end")
        if range_name == consts.RANGE_ALL_TIME:
            return range_name, None, None
        if range_name not in consts.DATE_PRESETS:
            logger.debug("Unknown range %r; using last 7 days", range_name)
        start, end = dates.resolve_date_preset(range_name, now=now)
        return range_name, start.isoformat(), end.isoformat()

    def _parse_bounds(self, start: Optional[str], end: Optional[str],
                      now: datetime) -> Tuple[Optional[DateRange],
                                              Optional[str], Optional[str],
                                              bool, bool]:
        bounds: Dict[str, str] = {}
        invalid_start = invalid_end = False
        if start:
            try:
                bounds["gte"] = dates.format_bound(dates.start_of_day(start))
            except ValueError:
                invalid_start = True
                fallback = dates.fallback_start(now).isoformat()
                log_default(logger, "start", start, fallback)
                start = fallback
        if end:
            try:
                bounds["lte"] = dates.format_bound(dates.end_of_day(end))
            except ValueError:
                invalid_end = True
                fallback = dates.fallback_end(now).isoformat()
                log_default(logger, "end", end, fallback)
                end = fallback

        date_range: Optional[DateRange] = None
        if bounds:
            bounds["format"] = consts.ES_DATETIME_FORMAT
            bounds["time_zone"] = self.timezone
            date_range = {self.date_field: bounds}  # type: ignore
        return date_range, start, end, invalid_start, invalid_end

    def _validate_sort(self, sort: Optional[str]) -> Tuple[str, bool]:
        if not sort:
            return self.mapping.sort_path(self.defaults.sort), False
        sort = str(sort)
        invalid = not self.mapping.is_sortable(sort)
        if invalid:
            log_default(logger, "sort", sort, self.defaults.sort)
            sort = self.defaults.sort
        return self.mapping.sort_path(sort), invalid

    def _validate_order(self, order: Optional[str]) -> Tuple[str, bool]:
        order = order or self.defaults.order
        if order not in consts.VALID_ORDERS:
            log_default(logger, "order", order, self.defaults.order)
            return self.defaults.order, True
        return order, False

    def _validate_size(self, value: Any) -> Tuple[int, bool]:
        if value is None or value == "":
            return self.defaults.size, False
        size = parse_size(value)
        if size is None:
            log_default(logger, "size", value, self.defaults.size)
            return self.defaults.size, True
        return size, False

    def _assemble_options(self, sort: str, order: str, size: int,
                          search_after: Optional[List[Any]]) -> Options:
        options = Options()
        if search_after:
            options["search_after"] = search_after
        options["size"] = size
        options["from"] = consts.PAGING_FROM_CURSOR
        options["sort"] = [
            {sort: {"order": order}},
            {self.tiebreaker: {"order": consts.ORDER_ASC}},
        ]
        return options


def normalize(raw: Mapping[str, Any], mapping: FieldMapping,
              defaults: Optional[SearchDefaults] = None,
              now: Optional[datetime] = None, **kwargs: Any
              ) -> NormalizedRequest:
    """
    Normalize ``raw`` request parameters against ``mapping``.

    Shorthand for ``QueryNormalizer(mapping, defaults, **kwargs)
    .normalize(raw, now=now)``.
    """
    return QueryNormalizer(mapping, defaults, **kwargs).normalize(raw, now=now)
