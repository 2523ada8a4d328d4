"""Base domain classes: field mappings and caller-supplied defaults."""

from dataclasses import dataclass, field, asdict as _asdict
from typing import Any, Dict, Iterator, List, Mapping, Optional

from querynorm import consts


def asdict(obj: Any) -> Dict[Any, Any]:
    """Coerce a dataclass object to a dict."""
    return {key: value for key, value in _asdict(obj).items()}


@dataclass(frozen=True)
class FieldProperty:
    """Declared type of a single mapped field, with optional sub-fields."""

    type: str
    fields: Mapping[str, "FieldProperty"] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldProperty":
        """Build a property from the Elasticsearch mapping representation."""
        subfields = {
            name: cls.from_dict(sub)
            for name, sub in (data.get("fields") or {}).items()
        }
        # Object fields declare ``properties`` rather than a ``type``.
        return cls(type=data.get("type", "object"), fields=subfields)

    @property
    def keyword_subfield(self) -> Optional[str]:
        """Name of the first ``keyword``-typed sub-field, if any."""
        for name, sub in self.fields.items():
            if sub.type == consts.KEYWORD:
                return name
        return None


class FieldMapping(Mapping[str, FieldProperty]):
    """
    Mapping of permitted field names to their declared types.

    Preserves the declaration order of the fields. Instances are read-only.

    Examples
    --------
    .. code-block:: python

       mapping = FieldMapping.from_properties({
           "title": {"type": "text",
                     "fields": {"raw": {"type": "keyword"}}},
           "status": {"type": "keyword"},
       })
       mapping.sort_path("title")    # "title.raw"

    """

    def __init__(self, properties: Optional[Mapping[str, FieldProperty]] = None
                 ) -> None:
        self._properties: Dict[str, FieldProperty] = dict(properties or {})

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "FieldMapping":
        """Build from the ``properties`` object of an Elasticsearch mapping."""
        return cls({
            name: prop if isinstance(prop, FieldProperty)
            else FieldProperty.from_dict(prop)
            for name, prop in properties.items()
        })

    def __getitem__(self, name: str) -> FieldProperty:
        return self._properties[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"FieldMapping({self._properties!r})"

    def type_of(self, name: str) -> Optional[str]:
        """Get the declared type of ``name``, or ``None`` if not mapped."""
        prop = self._properties.get(name)
        return prop.type if prop is not None else None

    def fields_of_type(self, *types: str) -> List[str]:
        """Get the names of all fields declared with one of ``types``."""
        return [name for name, prop in self._properties.items()
                if prop.type in types]

    def is_sortable(self, path: str) -> bool:
        """
        Determine whether ``path`` names a field that may be sorted on.

        Either a mapped field, or a ``<field>.<sub>`` path where ``<sub>`` is
        a ``keyword`` sub-field of a mapped field.
        """
        if path in self._properties:
            return True
        name, _, sub = path.partition(".")
        prop = self._properties.get(name)
        if prop is None or not sub or sub not in prop.fields:
            return False
        return prop.fields[sub].type == consts.KEYWORD

    def sort_path(self, name: str) -> str:
        """
        Get the path to sort on for the field ``name``.

        Full-text fields cannot be sorted on, so a ``text`` field with a
        ``keyword`` sub-field resolves to ``<field>.<sub>``. Anything else
        resolves to itself.
        """
        prop = self._properties.get(name)
        if prop is None or prop.type != consts.TEXT:
            return name
        sub = prop.keyword_subfield
        return f"{name}.{sub}" if sub else name


@dataclass(frozen=True)
class SearchDefaults:
    """Values used when a request omits or mangles sort, order or size."""

    sort: str = consts.DEFAULT_SORT
    order: str = consts.DEFAULT_ORDER
    size: int = consts.DEFAULT_SIZE
