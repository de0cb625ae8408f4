# Core module exports
from fieldcheck.core.config import Settings, get_settings
from fieldcheck.core.logging import (
    configure_logging,
    configure_from_settings,
    get_logger,
    session_logger,
    language_logger,
)
