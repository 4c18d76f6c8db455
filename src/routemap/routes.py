"""Route table: the ordered collection of resolved routes."""

import threading
from collections import Counter
from collections.abc import Callable, Iterable, Iterator

from routemap.models import RouteEntry


class RouteTable:
    """Insertion-ordered routes with advisory duplicate detection.

    Appends are serialized so that composers running on worker threads can
    merge into one table. Duplicates are reported, never removed.
    """

    def __init__(self, entries: Iterable[RouteEntry] = ()):
        self._entries: list[RouteEntry] = list(entries)
        self._lock = threading.Lock()

    def insert(self, entry: RouteEntry) -> None:
        """Append a route."""
        with self._lock:
            self._entries.append(entry)

    def extend(self, entries: Iterable[RouteEntry]) -> None:
        """Append several routes as one contiguous block."""
        batch = list(entries)
        with self._lock:
            self._entries.extend(batch)

    def entries(self) -> Iterator[RouteEntry]:
        """Iterate routes in insertion order over a snapshot of the table."""
        with self._lock:
            snapshot = tuple(self._entries)
        return iter(snapshot)

    def duplicates(
        self, key: Callable[[RouteEntry], object] | None = None
    ) -> list[RouteEntry]:
        """Entries whose identity is shared with at least one other entry.

        Identity defaults to ``(verb, full_path)`` compared exactly; pass a
        ``key`` to compare, for example, normalized paths instead.
        """
        key = key or (lambda e: e.key)
        snapshot = list(self.entries())
        counts = Counter(key(e) for e in snapshot)
        return [e for e in snapshot if counts[key(e)] > 1]

    def by_class(self, class_name: str) -> list[RouteEntry]:
        """Routes declared by a specific class."""
        return [e for e in self.entries() if e.source_class == class_name]

    def __iter__(self) -> Iterator[RouteEntry]:
        return self.entries()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
