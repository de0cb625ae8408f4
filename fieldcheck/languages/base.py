"""Message tables and the Translator interface."""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, field_validator

ATTRIBUTE_PLACEHOLDER = ":attr"
RULE_PLACEHOLDER = ":rule"
FALLBACK_KEY = "fallback"


@runtime_checkable
class Translator(Protocol):
    """Read-only lookups used by a validation session."""

    def rule_template(self, rule: str) -> str | None: ...

    def localized_attribute(self, attribute: str) -> str | None: ...


class MessageCatalog(BaseModel):
    """Schema of a bundled YAML language table."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str
    name: str
    native_name: str
    rules: dict[str, str]
    attributes: dict[str, str] = {}
    messages: dict[str, str] = {}
    errors: dict[str, str] = {}
    info: dict[str, str] = {}

    @field_validator("rules")
    @classmethod
    def _templates_have_placeholder(cls, rules: dict[str, str]) -> dict[str, str]:
        missing = sorted(k for k, v in rules.items() if ATTRIBUTE_PLACEHOLDER not in v)
        if missing:
            raise ValueError(f"templates without '{ATTRIBUTE_PLACEHOLDER}': {', '.join(missing)}")
        return rules


def _frozen(mapping: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class MessageTable:
    """Immutable rule-template and attribute-name mappings for one language.

    Safe to share between sessions: nothing mutates it after construction.
    """
    code: str
    name: str
    native_name: str
    rules: Mapping[str, str] = field(default_factory=_frozen)
    attributes: Mapping[str, str] = field(default_factory=_frozen)
    messages: Mapping[str, str] = field(default_factory=_frozen)
    errors: Mapping[str, str] = field(default_factory=_frozen)
    info: Mapping[str, str] = field(default_factory=_frozen)

    def __post_init__(self):
        for name in ("rules", "attributes", "messages", "errors", "info"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    @classmethod
    def from_catalog(cls, catalog: MessageCatalog) -> "MessageTable":
        return cls(code=catalog.code, name=catalog.name, native_name=catalog.native_name,
            rules=catalog.rules, attributes=catalog.attributes, messages=catalog.messages,
            errors=catalog.errors, info=catalog.info)

    def rule_template(self, rule: str) -> str | None:
        return self.rules.get(rule)

    def localized_attribute(self, attribute: str) -> str | None:
        return self.attributes.get(attribute)

    def to_dict(self) -> dict:
        return {"code": self.code, "name": self.name, "nativeName": self.native_name}
