"""Language tables for localized validation messages.

Provides a registry of immutable message tables and the Translator interface
that sessions consume.
"""
from .base import MessageCatalog, MessageTable, Translator, ATTRIBUTE_PLACEHOLDER, FALLBACK_KEY, RULE_PLACEHOLDER
from .registry import (
    EN,
    FA,
    get_table,
    list_languages,
    load_table,
    register,
    resolve,
    system_error,
    system_info,
    translate_error,
    translate_message,
)

__all__ = [
    "EN",
    "FA",
    "ATTRIBUTE_PLACEHOLDER",
    "FALLBACK_KEY",
    "RULE_PLACEHOLDER",
    "MessageCatalog",
    "MessageTable",
    "Translator",
    "get_table",
    "list_languages",
    "load_table",
    "register",
    "resolve",
    "system_error",
    "system_info",
    "translate_error",
    "translate_message",
]
