"""fieldcheck - fluent, localized field validation."""
from fieldcheck.core.errors import ConfigurationError
from fieldcheck.core.validation import (
    RuleFailure,
    RuleKey,
    ValidationContext,
    ValidationError,
    ValidationMode,
    Validator,
    attribute,
)
from fieldcheck.languages import EN, FA, MessageTable, Translator

__version__ = "0.1.0"

__all__ = [
    "attribute",
    "Validator",
    "ValidationContext",
    "ValidationError",
    "ValidationMode",
    "RuleKey",
    "RuleFailure",
    "ConfigurationError",
    "EN",
    "FA",
    "MessageTable",
    "Translator",
]
