"""
Locale-specific validation messages.

Maps a field failure plus a locale tag to a human-readable message.
All lookups are pure data; resolve() never raises and never returns an
empty string.
"""

from typing import Any, Iterable, Mapping

from apiboot.shared.errors.types import FieldFailure

DEFAULT_LOCALE = "en"
GENERIC_RULE = "*"

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "missing": "{field} is a required field",
        "string_too_short": "{field} must be at least {min_length} characters in length",
        "string_too_long": "{field} must be a maximum of {max_length} characters in length",
        "too_short": "{field} must contain at least {min_length} items",
        "too_long": "{field} must contain at most {max_length} items",
        "greater_than": "{field} must be greater than {gt}",
        "greater_than_equal": "{field} must be {ge} or greater",
        "less_than": "{field} must be less than {lt}",
        "less_than_equal": "{field} must be {le} or less",
        "multiple_of": "{field} must be a multiple of {multiple_of}",
        "string_pattern_mismatch": "{field} must match the pattern {pattern}",
        "string_type": "{field} must be a string",
        "int_type": "{field} must be an integer",
        "int_parsing": "{field} must be a valid integer",
        "float_parsing": "{field} must be a valid number",
        "bool_parsing": "{field} must be a valid boolean",
        "date_parsing": "{field} must be a valid date",
        "datetime_parsing": "{field} must be a valid datetime",
        "uuid_parsing": "{field} must be a valid UUID",
        "url_parsing": "{field} must be a valid URL",
        "enum": "{field} must be one of {expected}",
        "literal_error": "{field} must be one of {expected}",
        "extra_forbidden": "{field} is not allowed",
        "json_invalid": "request body is not valid JSON",
        "value_error": "{field} is invalid: {error}",
        GENERIC_RULE: "{field} is invalid",
    },
    "zh": {
        "missing": "{field}为必填字段",
        "string_too_short": "{field}长度必须至少为{min_length}个字符",
        "string_too_long": "{field}长度不能超过{max_length}个字符",
        "too_short": "{field}必须至少包含{min_length}项",
        "too_long": "{field}最多只能包含{max_length}项",
        "greater_than": "{field}必须大于{gt}",
        "greater_than_equal": "{field}必须大于或等于{ge}",
        "less_than": "{field}必须小于{lt}",
        "less_than_equal": "{field}必须小于或等于{le}",
        "multiple_of": "{field}必须是{multiple_of}的倍数",
        "string_pattern_mismatch": "{field}格式不正确",
        "string_type": "{field}必须是字符串",
        "int_type": "{field}必须是整数",
        "int_parsing": "{field}必须是有效的整数",
        "float_parsing": "{field}必须是有效的数字",
        "bool_parsing": "{field}必须是有效的布尔值",
        "date_parsing": "{field}必须是有效的日期",
        "datetime_parsing": "{field}必须是有效的日期时间",
        "uuid_parsing": "{field}必须是有效的UUID",
        "url_parsing": "{field}必须是有效的URL",
        "enum": "{field}必须是[{expected}]中的一个",
        "literal_error": "{field}必须是[{expected}]中的一个",
        "extra_forbidden": "不允许提交{field}",
        "json_invalid": "请求体不是有效的JSON",
        "value_error": "{field}无效: {error}",
        GENERIC_RULE: "{field}无效",
    },
}

SUPPORTED_LOCALES = frozenset(_MESSAGES)


class _Params(dict):
    """Format mapping that leaves unknown placeholders readable."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def parse_accept_language(header: str | None) -> list[str]:
    """Return the language tags of an Accept-Language header, best first.

    Entries with a malformed or zero ``q`` weight are skipped. Ties keep
    header order.
    """
    if not header:
        return []
    weighted: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        tag = tag.strip().lower()
        if not tag:
            continue
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                continue
        if quality <= 0:
            continue
        weighted.append((-quality, position, tag))
    return [tag for _, _, tag in sorted(weighted)]


def negotiate_locale(header: str | None, default: str = DEFAULT_LOCALE) -> str:
    """Pick the first supported locale named by the header."""
    for tag in parse_accept_language(header):
        primary = tag.replace("_", "-").split("-", 1)[0]
        if primary in SUPPORTED_LOCALES:
            return primary
    return default if default in SUPPORTED_LOCALES else DEFAULT_LOCALE


def _template(locale: str, rule: str) -> str:
    for candidate in (locale, DEFAULT_LOCALE):
        table = _MESSAGES.get(candidate)
        if table is not None and rule in table:
            return table[rule]
    table = _MESSAGES.get(locale, _MESSAGES[DEFAULT_LOCALE])
    return table[GENERIC_RULE]


def resolve(locale: str | None, failure: FieldFailure) -> str:
    """Render the message for one failure in the given locale."""
    locale = negotiate_locale(locale)
    params = _Params({key: _render(value) for key, value in failure.params.items()})
    params["field"] = failure.field or "value"
    message = _template(locale, failure.rule).format_map(params)
    return message or _MESSAGES[DEFAULT_LOCALE][GENERIC_RULE].format_map(params)


def translate(
    locale: str | None, failures: Iterable[FieldFailure]
) -> list[dict[str, str]]:
    """Render every failure, preserving order, as ``{field, message}`` items."""
    return [
        {"field": failure.field, "message": resolve(locale, failure)}
        for failure in failures
    ]


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, Mapping):
        return ", ".join(f"{k}={v}" for k, v in value.items())
    return str(value)
