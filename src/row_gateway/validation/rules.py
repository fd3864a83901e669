"""Rule based value validator.

Rule tokens follow the ``name`` or ``name[parameter]`` form, e.g.
``max_length[32]`` or ``enum[open,closed]``. Every rule except ``required``
passes when the value is unset (``None`` or an empty string).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from row_gateway.errors import UnknownRuleError

RuleFunc = Callable[[Any, str | None], bool]

_TOKEN = re.compile(r"^(?P<name>[a-z_]+)(?:\[(?P<param>.*)\])?$")
_INTEGER = re.compile(r"^[-+]?\d+$")
_NATURAL = re.compile(r"^\d+$")
_NUMERIC = re.compile(r"^[-+]?(\d*\.)?\d+$")
_ALPHA = re.compile(r"^[a-zA-Z]+$")
_ALPHA_NUMERIC = re.compile(r"^[a-zA-Z0-9]+$")
_ALPHA_DASH = re.compile(r"^[a-zA-Z0-9_-]+$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_BOOLEAN_STRINGS = frozenset({"0", "1", "y", "n", "yes", "no", "true", "false"})


def _is_unset(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _int_param(name: str, param: str | None) -> int:
    try:
        return int(param or "")
    except ValueError as exc:
        msg = f"Rule '{name}' requires an integer parameter, got {param!r}"
        raise UnknownRuleError(msg) from exc


def _as_decimal(value: Any) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = Decimal(str(value))
    elif isinstance(value, str) and _NUMERIC.fullmatch(value.strip()):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    # NaN and infinity do not compare
    return number if number.is_finite() else None


def _required(value: Any, _: str | None) -> bool:
    return not _is_unset(value)


def _integer(value: Any, _: str | None) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(_INTEGER.fullmatch(value.strip()))


def _numeric(value: Any, _: str | None) -> bool:
    return _as_decimal(value) is not None


def _is_natural(value: Any, _: str | None) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and bool(_NATURAL.fullmatch(value.strip()))


def _is_natural_no_zero(value: Any, param: str | None) -> bool:
    return _is_natural(value, param) and int(value) != 0


def _pattern(regex: re.Pattern[str]) -> RuleFunc:
    def check(value: Any, _: str | None) -> bool:
        return bool(regex.fullmatch(str(value)))

    return check


def _boolean(value: Any, _: str | None) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return value in (0, 1)
    return isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS


def _min_length(value: Any, param: str | None) -> bool:
    return len(str(value)) >= _int_param("min_length", param)


def _max_length(value: Any, param: str | None) -> bool:
    return len(str(value)) <= _int_param("max_length", param)


def _exact_length(value: Any, param: str | None) -> bool:
    return len(str(value)) == _int_param("exact_length", param)


def _compare(name: str, value: Any, param: str | None) -> int | None:
    bound = _as_decimal(param)
    if bound is None:
        msg = f"Rule '{name}' requires a numeric parameter, got {param!r}"
        raise UnknownRuleError(msg)
    number = _as_decimal(value)
    if number is None:
        return None
    return (number > bound) - (number < bound)


def _greater_than(value: Any, param: str | None) -> bool:
    return _compare("greater_than", value, param) == 1


def _less_than(value: Any, param: str | None) -> bool:
    return _compare("less_than", value, param) == -1


def _enum(value: Any, param: str | None) -> bool:
    choices = [choice.strip() for choice in (param or "").split(",")]
    return str(value) in choices


DEFAULT_RULES: Mapping[str, RuleFunc] = {
    "required": _required,
    "integer": _integer,
    "numeric": _numeric,
    "is_natural": _is_natural,
    "is_natural_no_zero": _is_natural_no_zero,
    "alpha": _pattern(_ALPHA),
    "alpha_numeric": _pattern(_ALPHA_NUMERIC),
    "alpha_dash": _pattern(_ALPHA_DASH),
    "valid_email": _pattern(_EMAIL),
    "boolean": _boolean,
    "min_length": _min_length,
    "max_length": _max_length,
    "exact_length": _exact_length,
    "greater_than": _greater_than,
    "less_than": _less_than,
    "enum": _enum,
}


def parse_rule(token: str) -> tuple[str, str | None]:
    """Split ``name[param]`` into its name and optional parameter."""

    match = _TOKEN.fullmatch(token.strip())
    if match is None:
        msg = f"Malformed validation rule {token!r}"
        raise UnknownRuleError(msg)
    return match.group("name"), match.group("param")


class RuleValidator:
    """Validator evaluating rule tokens against a single value."""

    def __init__(self, extra_rules: Mapping[str, RuleFunc] | None = None) -> None:
        self._rules: dict[str, RuleFunc] = dict(DEFAULT_RULES)
        if extra_rules:
            self._rules.update(extra_rules)
        self._failed: list[str] = []

    def register_rule(self, name: str, func: RuleFunc) -> None:
        self._rules[name] = func

    def validate(self, rules: Sequence[str], value: Any) -> bool:
        self._failed = []
        unset = _is_unset(value)
        for token in rules:
            name, param = parse_rule(token)
            try:
                func = self._rules[name]
            except KeyError as exc:
                msg = f"Unknown validation rule '{name}'"
                raise UnknownRuleError(msg) from exc
            if unset and name != "required":
                continue
            if not func(value, param):
                self._failed.append(name)
        return not self._failed

    def failed_rules(self) -> list[str]:
        return list(self._failed)


__all__ = ["DEFAULT_RULES", "RuleFunc", "RuleValidator", "parse_rule"]
