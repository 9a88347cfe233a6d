"""Ordered, field-tagged collection of validation failures."""

from collections.abc import Iterable, Iterator

from ruleforge.types import ErrorEntry


class ErrorBag:
    """Holds the current failure messages of a ValidationEngine.

    Entries keep insertion order and are not deduplicated. The engine
    replaces a field's entries at the start of every validation of that
    field, so the bag always reflects the latest result per field.

    Example:
        bag = ErrorBag()
        bag.add("email", "The email must be a valid email.")
        bag.first("email")   # "The email must be a valid email."
        bag.all()            # ["The email must be a valid email."]
    """

    def __init__(self) -> None:
        self._entries: list[ErrorEntry] = []

    def add(self, field: str, message: str, rule: str | None = None) -> ErrorEntry:
        entry = ErrorEntry(field=field, message=message, rule=rule)
        self._entries.append(entry)
        return entry

    def remove(self, field: str) -> int:
        """Remove every entry for a field. Returns how many were removed."""
        kept = [e for e in self._entries if e.field != field]
        removed = len(self._entries) - len(kept)
        self._entries = kept
        return removed

    def clear(self) -> None:
        self._entries = []

    def all(self) -> list[str]:
        """All messages, flattened, in insertion order."""
        return [e.message for e in self._entries]

    def collect(self, field: str) -> list[str]:
        """All messages for one field, in insertion order."""
        return [e.message for e in self._entries if e.field == field]

    def first(self, field: str | None = None) -> str | None:
        """First message for a field, or the first message overall."""
        for entry in self._entries:
            if field is None or entry.field == field:
                return entry.message
        return None

    def has(self, field: str | None = None) -> bool:
        if field is None:
            return bool(self._entries)
        return any(e.field == field for e in self._entries)

    def count(self) -> int:
        return len(self._entries)

    def entries(self) -> list[ErrorEntry]:
        return list(self._entries)

    def sort_by_fields(self, order: Iterable[str]) -> None:
        """Stable reorder of entries by the given field order.

        Fields missing from `order` keep their relative order at the end.
        """
        rank = {name: i for i, name in enumerate(order)}
        last = len(rank)
        self._entries.sort(key=lambda e: rank.get(e.field, last))

    def to_dict(self) -> dict[str, list[str]]:
        result: dict[str, list[str]] = {}
        for entry in self._entries:
            result.setdefault(entry.field, []).append(entry.message)
        return result

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ErrorEntry]:
        return iter(list(self._entries))

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"ErrorBag({self.to_dict()!r})"
