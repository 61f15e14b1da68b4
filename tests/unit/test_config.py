"""
Unit tests for settings and per-call option defaults.
"""

import pytest
from pydantic import ValidationError

from eml_reader.config import Settings
from eml_reader.models.options import EmlOptions


@pytest.mark.unit
def test_explicit_values(mock_settings):
    assert mock_settings.max_email_size_mb == 1
    assert mock_settings.log_json is False
    assert mock_settings.default_charset == "utf-8"


@pytest.mark.unit
def test_environment_override(monkeypatch):
    monkeypatch.setenv("PARSER_VERBOSE", "true")
    monkeypatch.setenv("MAX_EMAIL_SIZE_MB", "5")

    settings = Settings()

    assert settings.parser_verbose is True
    assert settings.max_email_size_mb == 5


@pytest.mark.unit
def test_options_default_from_settings(monkeypatch):
    from eml_reader import config

    monkeypatch.setattr(config.settings, "unwrap_double_base64", True)

    assert EmlOptions().unwrap_double_base64 is True
    assert EmlOptions(unwrap_double_base64=False).unwrap_double_base64 is False


@pytest.mark.unit
def test_options_are_frozen():
    with pytest.raises(Exception):
        EmlOptions().headers_only = True


@pytest.mark.unit
def test_options_accept_camel_case_keys():
    options = EmlOptions.model_validate({"headersOnly": True, "unwrapDoubleBase64": True})

    assert options.headers_only is True
    assert options.unwrap_double_base64 is True


@pytest.mark.unit
def test_options_reject_unknown_keys():
    with pytest.raises(ValidationError):
        EmlOptions.model_validate({"headers_onyl": True})
