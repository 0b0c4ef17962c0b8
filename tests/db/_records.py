from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from stagedinsert import BaseInserter


@dataclass(frozen=True)
class Person:
    first_name: str
    last_name: str
    email: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None


class PersonInserter(BaseInserter[Person]):
    """Identity read back; name derived from two fields; email normalized."""

    def __init__(self, table: str = "people", **kwargs: Any) -> None:
        super().__init__(table, **kwargs)
        self.register_auto_column("id", "INTEGER")
        self.register_plain_column("name", lambda p: f"{p.first_name} {p.last_name}")
        self.register_plain_column("email", lambda p: p.email.strip().lower() if p.email else None)

    def merge(self, original: Person, auto_values: dict[str, Any]) -> Person:
        return replace(original, id=auto_values["id"])


class TimestampedPersonInserter(PersonInserter):
    def __init__(self, table: str = "people", **kwargs: Any) -> None:
        super().__init__(table, **kwargs)
        self.register_auto_column("created_at", "TEXT")

    def merge(self, original: Person, auto_values: dict[str, Any]) -> Person:
        return replace(original, id=auto_values["id"], created_at=auto_values["created_at"])


class PlainPersonInserter(BaseInserter[Person]):
    """No generated columns are read back."""

    def __init__(self, table: str = "people", **kwargs: Any) -> None:
        super().__init__(table, **kwargs)
        self.register_plain_column("name", lambda p: f"{p.first_name} {p.last_name}")
        self.register_plain_column("email", lambda p: p.email)

    def merge(self, original: Person, auto_values: dict[str, Any]) -> Person:
        raise AssertionError("merge must not be called without auto-generated columns")


def people(*names: str) -> list[Person]:
    """Build Person records from "First Last" strings."""
    out = []
    for name in names:
        first, _, last = name.partition(" ")
        out.append(Person(first_name=first, last_name=last or "X"))
    return out
