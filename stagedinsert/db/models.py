from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from ..errors import ConfigurationError

T = TypeVar("T")


class ColumnKind(str, Enum):
    PLAIN = "plain"
    AUTO = "auto"


@dataclass(frozen=True)
class ColumnMapping(Generic[T]):
    """
    One table column of an inserter definition.

    PLAIN columns carry an extractor that reads the value from a record.
    AUTO columns are generated by the database and carry the SQL type used
    to declare them in the staging table.
    """
    name: str
    kind: ColumnKind
    extractor: Optional[Callable[[T], Any]] = None
    db_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == ColumnKind.PLAIN:
            if not callable(self.extractor):
                raise ConfigurationError(
                    f"Plain column {self.name!r} requires a callable extractor"
                )
            if self.db_type is not None:
                raise ConfigurationError(
                    f"Plain column {self.name!r} cannot declare a db_type"
                )
        elif self.kind == ColumnKind.AUTO:
            if not isinstance(self.db_type, str) or not self.db_type.strip():
                raise ConfigurationError(
                    f"Auto-generated column {self.name!r} requires a non-empty db_type"
                )
            if self.extractor is not None:
                raise ConfigurationError(
                    f"Auto-generated column {self.name!r} cannot have an extractor"
                )
        else:
            raise ConfigurationError(f"Unknown column kind: {self.kind!r}")

    @property
    def is_auto_generated(self) -> bool:
        return self.kind == ColumnKind.AUTO
