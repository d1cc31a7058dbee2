"""Query string access.

``QueryParams`` keeps the decoded ``(name, value)`` pairs in the order
they appeared. Lookup by name returns the first occurrence; handlers
usually read a single value with a fallback::

    name = request.query.get("name", "Guest")

An empty value (``?name=``) counts as absent for ``get`` but is still
visible through indexing and ``get_list``.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Read-only, multi-valued view of a URL query string."""

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._pairs: tuple[tuple[str, str], ...] = tuple(
            parse_qsl(query_string.decode("latin-1"), keep_blank_values=True)
        )

    @property
    def raw(self) -> bytes:
        """The query string as received, still percent-encoded."""
        return self._raw

    def __getitem__(self, key: str) -> str:
        for name, value in self._pairs:
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len({name for name, _ in self._pairs})

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*; *default* when the key is missing or blank."""
        value = super().get(key)
        return value or default

    def get_list(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def __repr__(self) -> str:
        return f"QueryParams({self._raw.decode('latin-1')!r})"
