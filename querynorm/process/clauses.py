"""
Translate requested field values into ``bool`` query clauses.

Each field is classified by its mapped type:

- ``keyword`` and ``ip`` fields are exact matches, in the ``filter`` bucket;
- ``text`` fields are full-text matches, in the ``must`` bucket;
- ``boolean`` fields are exact matches on a coerced boolean, in ``filter``.

A value that begins with ``!`` is negated: its clause goes to ``must_not``
and the leading ``!`` characters are stripped before matching. Fields of any
other type are ignored.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from elasticsearch_dsl import Q

from querynorm import consts
from querynorm.domain import BoolClauses, FieldMapping, QueryValue

TRUTHY = ("1", "true", "on", "yes")


def to_bool(value: Any) -> bool:
    """Coerce a request value to a boolean. Unrecognized values are false."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def _values(value: QueryValue) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _clauses_for(query: Mapping[str, QueryValue], fields: Iterable[str],
                 qtype: str, occur: str, clauses: BoolClauses,
                 coerce: Optional[Callable[[Any], Any]] = None) -> None:
    selected = set(fields)
    for name, value in query.items():
        if name not in selected:
            continue
        for term in _values(value):
            belongs = occur
            if isinstance(term, str) \
                    and term.startswith(consts.NEGATION_PREFIX):
                belongs = "must_not"
                term = term.lstrip(consts.NEGATION_PREFIX)
            if coerce is not None:
                term = coerce(term)
            clauses[belongs].append({qtype: {name: term}})  # type: ignore


def build_bool_clauses(query: Mapping[str, QueryValue],
                       mapping: FieldMapping) -> BoolClauses:
    """
    Build the ``filter``, ``must`` and ``must_not`` clauses for ``query``.

    Parameters
    ----------
    query : dict
        Field name -> requested value (or list of values).
    mapping : :class:`.FieldMapping`

    Returns
    -------
    dict
        A :class:`.BoolClauses`. Clauses for keyword/ip fields come first,
        then text, then boolean; within each group, in ``query`` order. A
        list value yields one clause per element.

    """
    clauses = BoolClauses(filter=[], must=[], must_not=[])
    if not query:
        return clauses

    _clauses_for(query, mapping.fields_of_type(consts.KEYWORD, consts.IP),
                 "term", "filter", clauses)
    _clauses_for(query, mapping.fields_of_type(consts.TEXT),
                 "match", "must", clauses)
    _clauses_for(query, mapping.fields_of_type(consts.BOOLEAN),
                 "term", "filter", clauses, coerce=to_bool)
    return clauses


def to_query(clauses: BoolClauses) -> Q:
    """Build a ``bool`` :class:`.Q` from clauses; ``match_all`` if empty."""
    params: Dict[str, List[Q]] = {
        occur: [Q(clause) for clause in items]
        for occur, items in clauses.items() if items
    }
    if not params:
        return Q("match_all")
    return Q("bool", **params)
