"""Pytest configuration and fixtures for fieldcheck tests."""

from io import BytesIO

import pytest
from PIL import Image

from fieldcheck.core.config import get_settings


class FakeUpload:
    """Uploaded-file stand-in exposing only a MIME type."""

    def __init__(self, mime: str):
        self.mime = mime

    def mime_type(self) -> str:
        return self.mime


class DictTranslator:
    """Translator backed by two plain dicts."""

    def __init__(self, rules=None, attributes=None):
        self.rules = rules or {}
        self.attributes = attributes or {}

    def rule_template(self, rule):
        return self.rules.get(rule)

    def localized_attribute(self, attribute):
        return self.attributes.get(attribute)


class FixedSizeDecoder:
    """Image decoder that reports a fixed size for any non-empty payload."""

    def __init__(self, size):
        self._size = size
        self.calls = 0

    def size(self, data):
        self.calls += 1
        return self._size if data else None


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment overrides never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_png():
    """Factory for in-memory PNG payloads of a given size."""

    def _make(width: int = 10, height: int = 10) -> bytes:
        buffer = BytesIO()
        Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
        return buffer.getvalue()

    return _make


@pytest.fixture
def upload():
    """Factory for MIME-typed upload objects."""
    return FakeUpload


@pytest.fixture
def translator():
    """Factory for dict-backed translators."""
    return DictTranslator


@pytest.fixture
def fixed_decoder():
    """Factory for decoders that report a fixed image size."""
    return FixedSizeDecoder
