# Infrastructure module - Logging and configuration
# The client library only emits logs; front ends configure them

from .config import (
    ClientConfig, ConfigManager, ConfigError,
    load_client_config, resolve_api_key
)
from .logging import (
    get_logger, configure_logging, RequestContext,
    get_request_id, generate_request_id
)

__all__ = [
    # Config
    "ClientConfig",
    "ConfigManager",
    "ConfigError",
    "load_client_config",
    "resolve_api_key",
    # Logging
    "get_logger",
    "configure_logging",
    "RequestContext",
    "get_request_id",
    "generate_request_id",
]
