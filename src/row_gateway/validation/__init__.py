"""Validation dispatch, rule evaluation and error reporting."""

from .dispatcher import ValidationDispatcher, Validator, ValidatorFactory, split_rules
from .errors import ErrorCollection, FieldError
from .rules import DEFAULT_RULES, RuleFunc, RuleValidator

__all__ = [
    "DEFAULT_RULES",
    "ErrorCollection",
    "FieldError",
    "RuleFunc",
    "RuleValidator",
    "ValidationDispatcher",
    "Validator",
    "ValidatorFactory",
    "split_rules",
]
