"""Fluent Validation Session

One Validator per attribute. It holds the attribute name, the bound value,
the optional flag, the selected Translator and an append-only list of
failures. Rule methods evaluate a predicate against the value bound at call
time and, on failure, compose a localized message. Every rule method returns
the session so rules chain:

    error = (
        attribute("email")
        .with_value(form["email"])
        .lang("fa")
        .required()
        .email()
        .max_string(255)
        .first_error()
    )

A rule called before a language is selected raises ConfigurationError; that
is a setup bug, never a validation outcome.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from fieldcheck.core.config import get_settings
from fieldcheck.core.errors import ConfigurationError, precondition_failed
from fieldcheck.core.logging import session_logger
from fieldcheck.languages import ATTRIBUTE_PLACEHOLDER, EN, FA, FALLBACK_KEY, RULE_PLACEHOLDER, Translator, resolve

from . import rules
from .errors import RuleFailure, ValidationError, ValidationMode
from .media import DEFAULT_DECODER, ImageDecoder
from .rules import RuleKey

log = session_logger()


class Validator:
    """Per-attribute fluent builder that accumulates rule failures in call order."""

    __slots__ = ("attribute", "attribute_key", "value", "is_optional", "translator",
                 "_failures", "_localized", "_decoder")

    def __init__(self, attribute: str, *, image_decoder: ImageDecoder = DEFAULT_DECODER):
        self.attribute = attribute
        self.attribute_key = attribute
        self.value: Any = None
        self.is_optional = False
        self.translator: Translator | None = None
        self._failures: list[RuleFailure] = []
        self._localized = False
        self._decoder = image_decoder

    def __repr__(self) -> str:
        lang = getattr(self.translator, "code", type(self.translator).__name__ if self.translator else None)
        return f"Validator(attribute={self.attribute_key!r}, lang={lang!r}, failures={len(self._failures)})"

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def with_value(self, value: Any) -> Validator:
        self.value = value
        return self

    def lang(self, tag: object) -> Validator:
        """Select a bundled language; unsupported tags fall back to the default."""
        self.translator = resolve(tag)
        return self

    def en_msg(self) -> Validator:
        return self.lang(EN)

    def fa_msg(self) -> Validator:
        return self.lang(FA)

    def use_translator(self, translator: Translator) -> Validator:
        """Bind any object implementing the Translator lookups."""
        if translator is None:
            raise ConfigurationError(precondition_failed("translator must not be None", origin="session"))
        self.translator = translator
        return self

    def optional(self) -> Validator:
        """Let a native numeric zero pass the numeric rule."""
        self.is_optional = True
        return self

    # ------------------------------------------------------------------
    # Message composition
    # ------------------------------------------------------------------

    def _check(self, rule: RuleKey, passed: bool) -> Validator:
        if self.translator is None:
            raise ConfigurationError(precondition_failed(
                "Select a language with lang(), en_msg(), fa_msg() or use_translator() before calling rules.",
                origin="session", attribute=self.attribute_key, rule=rule.value))
        if not passed:
            self._fail(rule, self.translator)
        return self

    def _template(self, rule: RuleKey, translator: Translator) -> str:
        if (template := translator.rule_template(rule.value)) is not None:
            return template
        log.warning("untranslated_rule", rule=rule.value, attribute=self.attribute_key,
            translator=getattr(translator, "code", type(translator).__name__))
        fallback = translator.rule_template(FALLBACK_KEY) or get_settings().FALLBACK_TEMPLATE
        return fallback.replace(RULE_PLACEHOLDER, rule.value, 1)

    def _fail(self, rule: RuleKey, translator: Translator) -> None:
        template = self._template(rule, translator)
        # Localize the display name once; later failures reuse the rewritten name.
        if not self._localized and (localized := translator.localized_attribute(self.attribute_key)):
            self.attribute, self._localized = localized, True
        message = template.replace(ATTRIBUTE_PLACEHOLDER, self.attribute, 1)
        self._failures.append(RuleFailure(field=self.attribute_key, rule=rule.value, message=message,
            code=rule.error_code))
        log.debug("rule_failed", attribute=self.attribute_key, rule=rule.value)

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------

    def required(self) -> Validator:
        return self._check(RuleKey.REQUIRED, rules.required(self.value))

    def filled(self) -> Validator:
        return self._check(RuleKey.FILLED, rules.filled(self.value))

    def present(self) -> Validator:
        return self._check(RuleKey.PRESENT, rules.present(self.value))

    def prohibited(self) -> Validator:
        return self._check(RuleKey.PROHIBITED, rules.prohibited(self.value))

    def accepted(self) -> Validator:
        return self._check(RuleKey.ACCEPTED, rules.accepted(self.value))

    def declined(self) -> Validator:
        return self._check(RuleKey.DECLINED, rules.declined(self.value))

    # ------------------------------------------------------------------
    # Conditional presence
    # ------------------------------------------------------------------

    def required_if(self, other: Any, expected: Any = True) -> Validator:
        """Required when `other` matches `expected`; passes otherwise."""
        return self._check(RuleKey.REQUIRED_IF, rules.required_if(self.value, other, expected))

    def required_unless(self, other: Any, allowed: Iterable[Any]) -> Validator:
        """Required unless `other` is one of `allowed`."""
        return self._check(RuleKey.REQUIRED_UNLESS, rules.required_unless(self.value, other, allowed))

    def prohibited_if(self, other: Any, expected: Any = True) -> Validator:
        return self._check(RuleKey.PROHIBITED_IF, rules.prohibited_if(self.value, other, expected))

    def accepted_if(self, other: Any, expected: Any) -> Validator:
        return self._check(RuleKey.ACCEPTED_IF, rules.accepted_if(self.value, other, expected))

    def declined_if(self, other: Any, expected: Any) -> Validator:
        return self._check(RuleKey.DECLINED_IF, rules.declined_if(self.value, other, expected))

    # ------------------------------------------------------------------
    # Type and format
    # ------------------------------------------------------------------

    def string(self) -> Validator:
        return self._check(RuleKey.STRING, rules.string(self.value))

    def boolean(self) -> Validator:
        return self._check(RuleKey.BOOLEAN, rules.boolean(self.value))

    def integer(self) -> Validator:
        return self._check(RuleKey.INTEGER, rules.integer(self.value))

    def numeric(self) -> Validator:
        """Numbers and numeric strings; a native zero fails unless optional() was called."""
        return self._check(RuleKey.NUMERIC, rules.numeric(self.value, optional=self.is_optional))

    def array(self) -> Validator:
        return self._check(RuleKey.ARRAY, rules.array(self.value))

    def json(self) -> Validator:
        return self._check(RuleKey.JSON, rules.json_(self.value))

    def email(self) -> Validator:
        return self._check(RuleKey.EMAIL, rules.email(self.value))

    def url(self) -> Validator:
        return self._check(RuleKey.URL, rules.url(self.value))

    def active_url(self) -> Validator:
        return self._check(RuleKey.ACTIVE_URL, rules.active_url(self.value))

    def ip(self) -> Validator:
        return self._check(RuleKey.IP, rules.ip(self.value))

    def ipv4(self) -> Validator:
        return self._check(RuleKey.IPV4, rules.ipv4(self.value))

    def ipv6(self) -> Validator:
        return self._check(RuleKey.IPV6, rules.ipv6(self.value))

    def uuid(self) -> Validator:
        return self._check(RuleKey.UUID, rules.uuid(self.value))

    def timezone(self) -> Validator:
        return self._check(RuleKey.TIMEZONE, rules.timezone(self.value))

    def regex(self, pattern: str) -> Validator:
        return self._check(RuleKey.REGEX, rules.regex(self.value, pattern))

    def not_regex(self, pattern: str) -> Validator:
        return self._check(RuleKey.NOT_REGEX, rules.not_regex(self.value, pattern))

    def starts_with(self, prefixes: Iterable[str]) -> Validator:
        return self._check(RuleKey.STARTS_WITH, rules.starts_with(self.value, prefixes))

    def ends_with(self, suffixes: Iterable[str]) -> Validator:
        return self._check(RuleKey.ENDS_WITH, rules.ends_with(self.value, suffixes))

    # ------------------------------------------------------------------
    # Character class
    # ------------------------------------------------------------------

    def alpha(self) -> Validator:
        return self._check(RuleKey.ALPHA, rules.alpha(self.value))

    def alpha_dash(self) -> Validator:
        return self._check(RuleKey.ALPHA_DASH, rules.alpha_dash(self.value))

    def alpha_num(self) -> Validator:
        return self._check(RuleKey.ALPHA_NUM, rules.alpha_num(self.value))

    # ------------------------------------------------------------------
    # Comparison and membership
    # ------------------------------------------------------------------

    def same(self, other: Any) -> Validator:
        return self._check(RuleKey.SAME, rules.same(self.value, other))

    def different(self, other: Any) -> Validator:
        return self._check(RuleKey.DIFFERENT, rules.different(self.value, other))

    def confirmed(self, confirmation: Any) -> Validator:
        return self._check(RuleKey.CONFIRMED, rules.confirmed(self.value, confirmation))

    def distinct(self) -> Validator:
        return self._check(RuleKey.DISTINCT, rules.distinct(self.value))

    def in_(self, allowed: Iterable[Any]) -> Validator:
        return self._check(RuleKey.IN, rules.in_(self.value, allowed))

    def not_in(self, forbidden: Iterable[Any]) -> Validator:
        return self._check(RuleKey.NOT_IN, rules.not_in(self.value, forbidden))

    def in_array(self, values: Iterable[Any]) -> Validator:
        return self._check(RuleKey.IN_ARRAY, rules.in_array(self.value, values))

    def exists(self, values: Iterable[Any]) -> Validator:
        return self._check(RuleKey.EXISTS, rules.exists(self.value, values))

    def unique(self, existing: Iterable[Any]) -> Validator:
        return self._check(RuleKey.UNIQUE, rules.unique(self.value, existing))

    # ------------------------------------------------------------------
    # Range and size
    # ------------------------------------------------------------------

    def min_string(self, minimum: int) -> Validator:
        return self._check(RuleKey.MIN_STRING, rules.min_string(self.value, minimum))

    def max_string(self, maximum: int) -> Validator:
        return self._check(RuleKey.MAX_STRING, rules.max_string(self.value, maximum))

    def min_numeric(self, minimum: int | float | Decimal) -> Validator:
        return self._check(RuleKey.MIN_NUMERIC, rules.min_numeric(self.value, minimum))

    def max_numeric(self, maximum: int | float | Decimal) -> Validator:
        return self._check(RuleKey.MAX_NUMERIC, rules.max_numeric(self.value, maximum))

    def between(self, minimum: int | float, maximum: int | float) -> Validator:
        """Numbers by value, strings by length, containers by size."""
        return self._check(RuleKey.BETWEEN, rules.between(self.value, minimum, maximum))

    def digits(self, count: int) -> Validator:
        return self._check(RuleKey.DIGITS, rules.digits(self.value, count))

    def digits_between(self, minimum: int, maximum: int) -> Validator:
        return self._check(RuleKey.DIGITS_BETWEEN, rules.digits_between(self.value, minimum, maximum))

    # ------------------------------------------------------------------
    # Date
    # ------------------------------------------------------------------

    @staticmethod
    def _layout(layout: str | None) -> str:
        return layout or get_settings().DATE_FORMAT

    def date(self, layout: str | None = None) -> Validator:
        return self._check(RuleKey.DATE, rules.date_(self.value, self._layout(layout)))

    def date_format(self, layout: str) -> Validator:
        return self._check(RuleKey.DATE_FORMAT, rules.date_format(self.value, layout))

    def date_equals(self, target: date | datetime | str, layout: str | None = None) -> Validator:
        return self._check(RuleKey.DATE_EQUALS, rules.date_equals(self.value, target, self._layout(layout)))

    def before(self, target: date | datetime | str, layout: str | None = None) -> Validator:
        return self._check(RuleKey.BEFORE, rules.before(self.value, target, self._layout(layout)))

    def before_or_equal(self, target: date | datetime | str, layout: str | None = None) -> Validator:
        return self._check(RuleKey.BEFORE_OR_EQUAL, rules.before_or_equal(self.value, target, self._layout(layout)))

    def after(self, target: date | datetime | str, layout: str | None = None) -> Validator:
        return self._check(RuleKey.AFTER, rules.after(self.value, target, self._layout(layout)))

    def after_or_equal(self, target: date | datetime | str, layout: str | None = None) -> Validator:
        return self._check(RuleKey.AFTER_OR_EQUAL, rules.after_or_equal(self.value, target, self._layout(layout)))

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    def image(self) -> Validator:
        return self._check(RuleKey.IMAGE, rules.image(self.value, self._decoder))

    def dimensions(self, min_width: int, min_height: int, max_width: int, max_height: int) -> Validator:
        return self._check(RuleKey.DIMENSIONS,
            rules.dimensions(self.value, self._decoder, min_width, min_height, max_width, max_height))

    def mimes(self, allowed: Sequence[str]) -> Validator:
        return self._check(RuleKey.MIMES, rules.mimes(self.value, allowed))

    # ------------------------------------------------------------------
    # Password strength
    # ------------------------------------------------------------------

    def password_letters(self) -> Validator:
        return self._check(RuleKey.PASSWORD_LETTERS, rules.password_letters(self.value))

    def password_mixed(self) -> Validator:
        return self._check(RuleKey.PASSWORD_MIXED, rules.password_mixed(self.value))

    def password_numbers(self) -> Validator:
        return self._check(RuleKey.PASSWORD_NUMBERS, rules.password_numbers(self.value))

    def password_symbols(self) -> Validator:
        return self._check(RuleKey.PASSWORD_SYMBOLS, rules.password_symbols(self.value))

    def password_uncompromised(self, leaked: Iterable[str]) -> Validator:
        return self._check(RuleKey.PASSWORD_UNCOMPROMISED, rules.password_uncompromised(self.value, leaked))

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def first_error(self) -> str | None:
        return self._failures[0].message if self._failures else None

    def all_errors(self) -> list[str]:
        return [f.message for f in self._failures]

    def failures(self) -> tuple[RuleFailure, ...]:
        return tuple(self._failures)

    def passes(self) -> bool:
        return not self._failures

    def fails(self) -> bool:
        return bool(self._failures)

    def raise_for_errors(self, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> None:
        """Raise ValidationError carrying the first or all failures."""
        if not self._failures:
            return
        details = self._failures[:1] if mode is ValidationMode.FAIL_FAST else list(self._failures)
        raise ValidationError(message="Validation failed", details=details, mode=mode)

    def to_dict(self) -> dict[str, Any]:
        return {"attribute": self.attribute_key, "valid": self.passes(),
            "errors": [f.to_dict() for f in self._failures]}


def attribute(name: str, *, image_decoder: ImageDecoder = DEFAULT_DECODER) -> Validator:
    """Start a validation session for one attribute."""
    return Validator(name, image_decoder=image_decoder)
