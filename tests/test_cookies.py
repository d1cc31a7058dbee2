"""Tests for cookie parsing and Set-Cookie serialization."""

from switchyard.http.cookies import SetCookie, parse_cookies


class TestParseCookies:
    def test_empty(self) -> None:
        assert parse_cookies("") == {}

    def test_pairs(self) -> None:
        assert parse_cookies("lastname=Koko; theme=dark") == {"lastname": "Koko", "theme": "dark"}

    def test_percent_decoded_and_unquoted(self) -> None:
        assert parse_cookies('name="Dika%20Koko"') == {"name": "Dika Koko"}

    def test_ignores_pairs_without_equals(self) -> None:
        assert parse_cookies("flag; a=1") == {"a": "1"}


class TestSetCookie:
    def test_defaults(self) -> None:
        assert SetCookie("lastname", "Koko").to_header_value() == (
            "lastname=Koko; Path=/; HttpOnly; SameSite=lax"
        )

    def test_max_age(self) -> None:
        value = SetCookie("s", "1", max_age=60, httponly=False, samesite="").to_header_value()
        assert value == "s=1; Max-Age=60; Path=/"
