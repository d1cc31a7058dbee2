"""Request cookies in, ``Set-Cookie`` directives out."""

from dataclasses import dataclass
from urllib.parse import quote, unquote


def parse_cookies(header: str) -> dict[str, str]:
    """Split a ``Cookie`` header into names and percent-decoded values.

    Fragments without ``=`` are skipped. Surrounding double quotes on a
    value are dropped.
    """
    pairs = (fragment.strip().partition("=") for fragment in header.split(";"))
    return {
        name.strip(): unquote(value.strip().strip('"'))
        for name, sep, value in pairs
        if sep and name.strip()
    }


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One cookie to set on the client."""

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    httponly: bool = True
    samesite: str = "lax"

    def to_header_value(self) -> str:
        attributes = [
            f"Max-Age={self.max_age}" if self.max_age is not None else "",
            f"Path={self.path}" if self.path else "",
            "HttpOnly" if self.httponly else "",
            f"SameSite={self.samesite}" if self.samesite else "",
        ]
        cookie = f"{self.name}={quote(self.value, safe='')}"
        return "; ".join([cookie, *filter(None, attributes)])
