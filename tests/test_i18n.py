"""
Tests for locale-specific validation messages.

resolve() must be total: every locale/failure pair yields a non-empty
message, falling back to the default locale and then to a generic text.
"""

import pytest

from apiboot.shared.errors.types import FieldFailure
from apiboot.shared.i18n import (
    DEFAULT_LOCALE,
    negotiate_locale,
    parse_accept_language,
    resolve,
    translate,
)

MISSING_NAME = FieldFailure(field="name", rule="missing")


class TestParseAcceptLanguage:
    """Tests for parse_accept_language()."""

    def test_orders_by_quality(self) -> None:
        """Tags are ordered by q weight, ties by position."""
        header = "en;q=0.8, zh-CN, zh;q=0.9"
        assert parse_accept_language(header) == ["zh-cn", "zh", "en"]

    def test_skips_zero_and_malformed_weights(self) -> None:
        """q=0 and unparsable weights are dropped."""
        assert parse_accept_language("fr;q=0, de;q=abc, en") == ["en"]

    @pytest.mark.parametrize("header", [None, "", " , "])
    def test_empty_header(self, header: str | None) -> None:
        """Absent or blank headers yield no tags."""
        assert parse_accept_language(header) == []


class TestNegotiateLocale:
    """Tests for negotiate_locale()."""

    def test_absent_header_uses_default(self) -> None:
        """No header means the default locale."""
        assert negotiate_locale(None) == DEFAULT_LOCALE

    def test_first_supported_primary_subtag_wins(self) -> None:
        """The best supported primary subtag is chosen."""
        assert negotiate_locale("fr-FR, zh-TW;q=0.5, en;q=0.1") == "zh"

    def test_unsupported_header_uses_configured_default(self) -> None:
        """Unsupported languages fall back to the given default."""
        assert negotiate_locale("fr", default="zh") == "zh"

    def test_unsupported_default_falls_back_to_english(self) -> None:
        """An unsupported default falls back to English."""
        assert negotiate_locale("fr", default="xx") == "en"


class TestResolve:
    """Tests for resolve()."""

    def test_english_message(self) -> None:
        """English message for a missing field."""
        assert resolve("en", MISSING_NAME) == "name is a required field"

    def test_chinese_message(self) -> None:
        """Chinese message for a missing field."""
        assert resolve("zh-CN", MISSING_NAME) == "name为必填字段"

    def test_unknown_locale_falls_back_to_default(self) -> None:
        """Unknown locales use the default locale message."""
        assert resolve("xx-unknown", MISSING_NAME) == resolve(DEFAULT_LOCALE, MISSING_NAME)

    def test_rule_parameters_are_interpolated(self) -> None:
        """Rule parameters appear in the message."""
        failure = FieldFailure(field="age", rule="greater_than_equal", params={"ge": 18})
        assert resolve("en", failure) == "age must be 18 or greater"

    def test_unknown_rule_uses_generic_message(self) -> None:
        """Unknown rules get the generic message."""
        failure = FieldFailure(field="name", rule="no_such_rule")
        assert resolve("en", failure) == "name is invalid"
        assert resolve("zh", failure) == "name无效"

    def test_missing_parameters_never_raise(self) -> None:
        """A missing parameter leaves its placeholder."""
        failure = FieldFailure(field="name", rule="string_too_short")
        message = resolve("en", failure)
        assert message.startswith("name must be at least")

    @pytest.mark.parametrize("locale", [None, "", "en", "zh", "xx-unknown", "*"])
    @pytest.mark.parametrize(
        "failure",
        [
            MISSING_NAME,
            FieldFailure(field="", rule=""),
            FieldFailure(field="tags", rule="enum", params={"expected": ["a", "b"]}),
            FieldFailure(field="x", rule="value_error", params={"error": ValueError("bad")}),
        ],
    )
    def test_resolve_is_total(self, locale: str | None, failure: FieldFailure) -> None:
        """Every locale and failure pair yields a non-empty string."""
        message = resolve(locale, failure)
        assert isinstance(message, str)
        assert message


class TestTranslate:
    """Tests for translate()."""

    def test_preserves_order_and_count(self) -> None:
        """One message per failure, in input order."""
        failures = [
            FieldFailure(field="b", rule="missing"),
            FieldFailure(field="a", rule="missing"),
        ]
        assert translate("en", failures) == [
            {"field": "b", "message": "b is a required field"},
            {"field": "a", "message": "a is a required field"},
        ]
