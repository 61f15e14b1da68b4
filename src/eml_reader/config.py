"""
Application configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application configuration from environment variables.

    All settings can be overridden via environment variables with the same name.
    Parser settings only provide defaults for EmlOptions; every parse/read call
    carries its own options object.
    """

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Parser defaults
    default_charset: str = "utf-8"
    parser_verbose: bool = False
    unwrap_double_base64: bool = False  # Heuristic, may false-positive on valid HTML

    # Processing limits
    max_email_size_mb: int = 25

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Global settings instance
settings = Settings()
