from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, TypeVar

from ..errors import ConfigurationError
from .helpers import validate_identifier
from .models import ColumnKind, ColumnMapping

T = TypeVar("T")


class MappingRegistry(Generic[T]):
    """
    Ordered column mappings for one record type.

    Append-only while the inserter is being defined; read-only once frozen.
    Column names are unique within a registry.

    Usage:
        registry = MappingRegistry(reserved=("_ordinal",))
        registry.add_auto("id", "INT")
        registry.add_plain("name", lambda p: p.name)
        row = registry.project(person)  # {"name": "Ada"}
    """

    def __init__(self, reserved: tuple[str, ...] = ()) -> None:
        self._mappings: list[ColumnMapping[T]] = []
        self._reserved = frozenset(name.lower() for name in reserved)
        self._frozen = False

    def __iter__(self) -> Iterator[ColumnMapping[T]]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def add_plain(self, name: str, extractor: Callable[[T], Any]) -> ColumnMapping[T]:
        return self._add(ColumnMapping(name, ColumnKind.PLAIN, extractor=extractor))

    def add_auto(self, name: str, db_type: str) -> ColumnMapping[T]:
        return self._add(ColumnMapping(name, ColumnKind.AUTO, db_type=db_type))

    def _add(self, mapping: ColumnMapping[T]) -> ColumnMapping[T]:
        if self._frozen:
            raise ConfigurationError(
                f"Cannot register column {mapping.name!r}: the mapping is already in use"
            )
        validate_identifier(mapping.name, "column name")
        # unquoted identifiers are case-insensitive
        key = mapping.name.lower()
        if key in self._reserved:
            raise ConfigurationError(
                f"Column name {mapping.name!r} is reserved for the staging table"
            )
        if any(m.name.lower() == key for m in self._mappings):
            raise ConfigurationError(f"Duplicate column name: {mapping.name!r}")

        self._mappings.append(mapping)
        return mapping

    def plain_columns(self) -> list[ColumnMapping[T]]:
        return [m for m in self._mappings if m.kind == ColumnKind.PLAIN]

    def auto_columns(self) -> list[ColumnMapping[T]]:
        return [m for m in self._mappings if m.kind == ColumnKind.AUTO]

    def project(self, record: T) -> dict[str, Any]:
        """
        Convert one record into a column -> value row.

        Only PLAIN columns are projected, in registration order.
        """
        return {m.name: m.extractor(record) for m in self._mappings if m.kind == ColumnKind.PLAIN}
