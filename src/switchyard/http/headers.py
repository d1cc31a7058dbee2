"""Request headers.

ASGI hands headers over as a sequence of ``(name, value)`` byte pairs.
``Headers`` keeps that sequence for pass-through and builds a lowercase
name index once, so lookups are dictionary hits instead of scans.
"""

from collections.abc import Iterator, Mapping

type RawHeaders = tuple[tuple[bytes, bytes], ...]


class Headers(Mapping[str, str]):
    """Case-insensitive, read-only header mapping.

    Indexing returns the first value sent under a name; ``get_list``
    returns every value in arrival order.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: RawHeaders = ()) -> None:
        self._raw = raw
        index: dict[str, list[str]] = {}
        for name, value in raw:
            index.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._index = index

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> "Headers":
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    @property
    def raw(self) -> RawHeaders:
        return self._raw

    def get_list(self, key: str) -> list[str]:
        return list(self._index.get(key.lower(), ()))

    def __getitem__(self, key: str) -> str:
        try:
            return self._index[key.lower()][0]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"
