"""Build multipart/form-data request bodies for tests."""

from collections.abc import Mapping

BOUNDARY = "----SwitchyardTestBoundary"

# field name -> (filename, content, content type)
type FileField = tuple[str, bytes, str]


def multipart_body(
    fields: Mapping[str, str] | None = None,
    files: Mapping[str, FileField] | None = None,
    *,
    boundary: str = BOUNDARY,
) -> tuple[bytes, str]:
    """Encode *fields* and *files*. Returns ``(body, content_type)``."""
    parts: list[bytes] = []

    for name, value in (fields or {}).items():
        parts.append(f"--{boundary}\r\n".encode())
        parts.append(f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode())
        parts.append(f"{value}\r\n".encode())

    for name, (filename, content, content_type) in (files or {}).items():
        parts.append(f"--{boundary}\r\n".encode())
        parts.append(
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'.encode()
        )
        parts.append(f"Content-Type: {content_type}\r\n\r\n".encode())
        parts.append(content)
        parts.append(b"\r\n")

    parts.append(f"--{boundary}--\r\n".encode())
    return b"".join(parts), f"multipart/form-data; boundary={boundary}"
