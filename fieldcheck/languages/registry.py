"""Language table registry - loaded once at import, read-only afterwards."""
from importlib import resources

import yaml
from pydantic import ValidationError as SchemaError

from fieldcheck.core.config import get_settings
from fieldcheck.core.errors import ConfigurationError, table_load_failed, unknown_language
from fieldcheck.core.logging import language_logger

from .base import MessageCatalog, MessageTable

EN = "en"
FA = "fa"

_TABLES: dict[str, MessageTable] = {}

log = language_logger()


def register(table: MessageTable) -> None:
    """Register a message table under its language code."""
    _TABLES[table.code] = table


def get_table(code: str) -> MessageTable:
    """Get a table by exact code; unknown codes are a configuration error."""
    if code not in _TABLES:
        raise ConfigurationError(unknown_language(code, list(_TABLES), origin="languages.registry"))
    return _TABLES[code]


def resolve(code: object) -> MessageTable:
    """Get a table, falling back to the default language for unsupported tags."""
    if isinstance(code, str) and code in _TABLES:
        return _TABLES[code]
    default = get_settings().DEFAULT_LANGUAGE
    log.debug("language_fallback", requested=str(code), resolved=default)
    return _TABLES[default] if default in _TABLES else _TABLES[EN]


def list_languages() -> list[dict]:
    """List all registered languages."""
    return [t.to_dict() for t in _TABLES.values()]


def load_table(text: str, source: str = "<string>") -> MessageTable:
    """Parse and validate a YAML language table."""
    try:
        catalog = MessageCatalog.model_validate(yaml.safe_load(text))
    except (yaml.YAMLError, SchemaError) as e:
        raise ConfigurationError(table_load_failed(source, e, origin="languages.registry")) from e
    return MessageTable.from_catalog(catalog)


# ============================================================================
# Application message lookups
# ============================================================================

def translate_message(lang: object, key: str) -> str:
    return resolve(lang).messages.get(key, "")


def translate_error(lang: object, key: str) -> str:
    return resolve(lang).errors.get(key, "")


def system_error(key: str) -> str:
    return _TABLES[EN].errors.get(key, "")


def system_info(key: str) -> str:
    return _TABLES[EN].info.get(key, "")


def _auto_register() -> None:
    """Load bundled tables shipped in fieldcheck/languages/tables."""
    for entry in sorted(resources.files(__package__).joinpath("tables").iterdir(), key=lambda p: p.name):
        if entry.name.endswith(".yaml"):
            register(load_table(entry.read_text(encoding="utf-8"), source=entry.name))
    log.debug("tables_loaded", languages=sorted(_TABLES))


_auto_register()
