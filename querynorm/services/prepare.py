"""
Functions for preparing a :class:`.Search` from a normalized request.

Nothing here talks to a cluster; the returned :class:`.Search` can be
executed by the caller with whatever connection it holds.
"""

from datetime import date
from typing import Optional, Union

from elasticsearch_dsl import A, Q, Search

from querynorm import consts
from querynorm.domain import FieldMapping, NormalizedRequest
from querynorm.process.clauses import build_bool_clauses, to_query
from querynorm.process.dates import build_daily_buckets


def _date_range(request: NormalizedRequest) -> Optional[Q]:
    """Generate a query part for the date range, if there is one."""
    if not request.date_range:
        return None
    return Q("range", **request.date_range)


def prepare_search(request: NormalizedRequest, mapping: FieldMapping,
                   search: Optional[Search] = None) -> Search:
    """
    Prepare a :class:`.Search` from a :class:`.NormalizedRequest`.

    Parameters
    ----------
    request : :class:`.NormalizedRequest`
    mapping : :class:`.FieldMapping`
        Used to classify the queried fields.
    search : :class:`.Search`
        A search in preparation, e.g. bound to an index. A new, unbound
        :class:`.Search` is used if not given.

    Returns
    -------
    :class:`.Search`
        The search, with query, date range, sort and paging applied.

    """
    if search is None:
        search = Search()

    q = to_query(build_bool_clauses(request.query, mapping))
    search = search.query(q)
    date_range = _date_range(request)
    if date_range is not None:
        search = search.filter(date_range)

    options = request.options
    search = search.sort(*options.get("sort", []))
    params = {"size": options.get("size", consts.DEFAULT_SIZE)}
    if options.get("search_after"):
        params["search_after"] = options["search_after"]
    if options.get("from", consts.PAGING_FROM_CURSOR) \
            != consts.PAGING_FROM_CURSOR:
        params["from"] = options["from"]
    return search.extra(**params)


def daily_aggregation(field: str, start: Union[str, date],
                      end: Union[str, date]) -> A:
    """
    Build a ``date_range`` aggregation with one bucket per day.

    Parameters
    ----------
    field : str
        The date field to aggregate on.
    start : str or :class:`date`
    end : str or :class:`date`

    Returns
    -------
    :class:`.A`
        Ranges are labelled like ``Jan 01, 2024``. There are no ranges if
        either bound cannot be parsed.

    """
    ranges = [
        {
            "from": bucket["from"].strftime(consts.BUCKET_LABEL_FORMAT),
            "to": bucket["to"].strftime(consts.BUCKET_LABEL_FORMAT),
        }
        for bucket in build_daily_buckets(start, end)
    ]
    return A("date_range", field=field,
             format=consts.ES_BUCKET_LABEL_FORMAT, ranges=ranges)
