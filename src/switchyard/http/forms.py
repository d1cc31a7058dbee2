"""Form data parsing: URL-encoded and multipart.

URL-encoded bodies use stdlib ``urllib.parse``; multipart bodies are
tokenized with ``python-multipart`` and collected into named fields and
``UploadFile`` parts.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

import anyio
from python_multipart.multipart import MultipartParser, parse_options_header


@dataclass(frozen=True, slots=True, repr=False)
class UploadFile:
    """One file part of a multipart body, held in memory."""

    filename: str
    content_type: str
    size: int
    _content: bytes

    async def read(self) -> bytes:
        return self._content

    async def save(self, path: str | Path) -> Path:
        """Write the upload to *path*, which must be in an existing directory."""
        target = Path(path)
        async with await anyio.open_file(target, "wb") as fh:
            await fh.write(self._content)
        return target

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Text fields of a submitted form, plus its uploads under ``files``.

    Indexing gives the first value of a field; ``get_list`` gives all of
    them (repeated checkboxes, multi-selects)::

        form = await request.form()
        name = form.get("name", "Guest")
        upload = form.files.get("file")
    """

    __slots__ = ("_fields", "_files")

    def __init__(
        self,
        fields: dict[str, list[str]],
        files: dict[str, UploadFile] | None = None,
    ) -> None:
        self._fields = {name: values for name, values in fields.items() if values}
        self._files = dict(files or {})

    @property
    def files(self) -> Mapping[str, UploadFile]:
        return self._files

    def __getitem__(self, key: str) -> str:
        return self._fields[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def get_list(self, key: str) -> list[str]:
        return list(self._fields.get(key, ()))

    def to_mapping(self) -> dict[str, Any]:
        """Single-valued view for binding: first text value per field, then uploads."""
        return {**{name: values[0] for name, values in self._fields.items()}, **self._files}

    def __repr__(self) -> str:
        return f"FormData({dict(self)!r}, files={sorted(self._files)!r})"


def media_type(content_type: str) -> str:
    """Return the lower-cased primary token of a Content-Type value."""
    return content_type.split(";", 1)[0].strip().lower()


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body into FormData.

    Raises:
        ValueError: If the content type is not a form encoding, or the
            payload cannot be parsed.
    """
    kind = media_type(content_type)
    if kind == "application/x-www-form-urlencoded":
        return parse_urlencoded(body)
    if kind == "multipart/form-data":
        return parse_multipart(body, content_type)
    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def parse_urlencoded(body: bytes) -> FormData:
    """Parse URL-encoded form data (``+`` and percent escapes decoded).

    Raises ``UnicodeDecodeError`` (a ``ValueError``) for non-UTF-8 bodies.
    """
    return FormData(parse_qs(body.decode("utf-8"), keep_blank_values=True))


def parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse a ``multipart/form-data`` body.

    Raises ``ValueError`` if the boundary parameter is missing or the
    parser rejects the payload.
    """
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())
    parser.write(body)
    parser.finalize()
    if not collector.completed:
        msg = "Multipart body ended before the closing boundary"
        raise ValueError(msg)
    return FormData(collector.fields, collector.files)


class _PartCollector:
    """Accumulates parser callbacks into fields and files."""

    __slots__ = (
        "_data",
        "_header_field",
        "_header_value",
        "_headers",
        "completed",
        "fields",
        "files",
    )

    def __init__(self) -> None:
        self.fields: dict[str, list[str]] = {}
        self.files: dict[str, UploadFile] = {}
        self._headers: dict[str, str] = {}
        self._header_field = bytearray()
        self._header_value = bytearray()
        self._data = bytearray()
        self.completed = False

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_part_begin": self._on_part_begin,
            "on_part_data": self._on_part_data,
            "on_part_end": self._on_part_end,
            "on_header_field": self._on_header_field,
            "on_header_value": self._on_header_value,
            "on_header_end": self._on_header_end,
            "on_end": self._on_end,
        }

    def _on_end(self) -> None:
        self.completed = True

    def _on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field.extend(data[start:end])

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value.extend(data[start:end])

    def _on_header_end(self) -> None:
        name = self._header_field.decode("latin-1").lower()
        self._headers[name] = self._header_value.decode("latin-1")
        self._header_field.clear()
        self._header_value.clear()

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data.extend(data[start:end])

    def _on_part_end(self) -> None:
        _, params = parse_options_header(self._headers.get("content-disposition", ""))
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is not None:
            content = bytes(self._data)
            self.files[field_name] = UploadFile(
                filename=Path(filename.decode("utf-8")).name,
                content_type=self._headers.get("content-type", "application/octet-stream"),
                size=len(content),
                _content=content,
            )
        else:
            value = self._data.decode("utf-8", errors="replace")
            self.fields.setdefault(field_name, []).append(value)
