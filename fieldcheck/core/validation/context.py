"""Multi-attribute validation context."""
from __future__ import annotations

from typing import Any

from fieldcheck.languages import Translator

from .errors import RuleFailure, ValidationError, ValidationMode
from .media import DEFAULT_DECODER, ImageDecoder
from .session import Validator


class ValidationContext:
    """Context manager that owns one session per attribute and reports them together.

    Usage:
        with ValidationContext(lang="fa") as ctx:
            ctx.attribute("email").with_value(email).required().email()
            ctx.attribute("age").with_value(age).integer().between(18, 120)
        # Raises ValidationError if any attribute failed

    In FAIL_FAST mode only each attribute's first message is reported; the
    sessions themselves always evaluate every rule.
    """

    def __init__(self, lang: object = None, *, mode: ValidationMode = ValidationMode.COLLECT_ALL,
                 translator: Translator | None = None, max_errors: int = 50,
                 image_decoder: ImageDecoder = DEFAULT_DECODER):
        self.lang, self.mode, self.translator, self.max_errors = lang, mode, translator, max_errors
        self._decoder = image_decoder
        self._sessions: dict[str, Validator] = {}

    def __enter__(self) -> ValidationContext: return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None: self.raise_if_errors()
        return False

    def attribute(self, name: str) -> Validator:
        """Session for `name`, created on first use and bound to the context's language."""
        if (session := self._sessions.get(name)) is not None: return session
        session = Validator(name, image_decoder=self._decoder)
        if self.translator is not None: session.use_translator(self.translator)
        else: session.lang(self.lang)
        self._sessions[name] = session
        return session

    @property
    def has_errors(self) -> bool: return any(s.fails() for s in self._sessions.values())

    @property
    def failures(self) -> list[RuleFailure]:
        """Reported failures in attribute registration order, capped at max_errors."""
        result: list[RuleFailure] = []
        for session in self._sessions.values():
            found = session.failures()
            result.extend(found[:1] if self.mode is ValidationMode.FAIL_FAST else found)
        return result[:self.max_errors]

    def errors(self) -> dict[str, list[str]]:
        """Reported messages keyed by attribute; attributes that passed are omitted."""
        result: dict[str, list[str]] = {}
        for failure in self.failures: result.setdefault(failure.field, []).append(failure.message)
        return result

    def raise_if_errors(self) -> None:
        if details := self.failures:
            raise ValidationError(message="Validation failed", details=details, mode=self.mode)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": not self.has_errors, "errors": self.errors()}
