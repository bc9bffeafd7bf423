"""Configuration for the keyword search MCP server."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

TRANSPORTS = ("stdio", "http")


class KeywordSearchConfig:
    """Server configuration."""

    def __init__(self) -> None:
        """Initialize server configuration from environment variables."""
        self.server_name = os.getenv("KEYWORD_SEARCH_SERVER_NAME", "keyword-search-server")
        self.server_version = os.getenv("KEYWORD_SEARCH_SERVER_VERSION", "1.0.0")

        self.transport = os.getenv("KEYWORD_SEARCH_TRANSPORT", "stdio").lower()
        if self.transport not in TRANSPORTS:
            raise ValueError(
                "Invalid option for KEYWORD_SEARCH_TRANSPORT. Valid options are [stdio|http]"
            )

        self.host = os.getenv("KEYWORD_SEARCH_HOST", "0.0.0.0")
        self.port = self._get_port("KEYWORD_SEARCH_PORT", "3000")
        self.log_level = self._get_log_level("KEYWORD_SEARCH_LOG_LEVEL", "INFO")

    @staticmethod
    def _get_port(key: str, default: str) -> int:
        """Get a TCP port from the environment or raise descriptive error."""
        raw = os.getenv(key, default)
        try:
            port = int(raw)
        except ValueError:
            raise ValueError(f"Environment variable {key} must be an integer, got {raw!r}")
        if not 0 < port < 65536:
            raise ValueError(f"Environment variable {key} must be between 1 and 65535, got {port}")
        return port

    @staticmethod
    def _get_log_level(key: str, default: str) -> int:
        name = os.getenv(key, default).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Environment variable {key} is not a valid log level: {name}")
        return level


def configure_logging(config: KeywordSearchConfig) -> None:
    """Send log records to stderr; stdout is reserved for the stdio transport."""
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
