import pytest
from pydantic import ValidationError

from config import (
    ALLOWED_METHODS, DEFAULT_ALLOWED_HEADERS, DEFAULT_ALLOWED_ORIGINS, DEFAULT_PORT,
    load_settings,
)
from errors import ConfigurationError


def test_defaults_from_empty_environment():
    settings = load_settings({}, dotenv=False)
    assert settings.database_url is None
    assert not settings.has_database_url
    assert settings.port == DEFAULT_PORT == 5000
    assert settings.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert settings.allowed_methods == ALLOWED_METHODS
    assert settings.allowed_headers == DEFAULT_ALLOWED_HEADERS
    assert settings.allow_credentials is True
    assert settings.db_connect_timeout == 10.0


def test_reads_connection_string_and_port():
    settings = load_settings({"MONGO_URI": "mongodb://db:27017/app", "PORT": "8080"}, dotenv=False)
    assert settings.has_database_url
    assert settings.database_url == "mongodb://db:27017/app"
    assert settings.port == 8080


def test_blank_connection_string_is_treated_as_missing():
    settings = load_settings({"MONGO_URI": "   "}, dotenv=False)
    assert not settings.has_database_url


def test_empty_port_falls_back_to_default():
    assert load_settings({"PORT": ""}, dotenv=False).port == DEFAULT_PORT


@pytest.mark.parametrize("raw", ["abc", "50.5"])
def test_malformed_port_names_the_key(raw):
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings({"PORT": raw}, dotenv=False)
    assert exc_info.value.key == "PORT"


def test_port_out_of_range():
    with pytest.raises(ConfigurationError):
        load_settings({"PORT": "70000"}, dotenv=False)


def test_allowed_origins_override_drops_blank_entries():
    settings = load_settings({"ALLOWED_ORIGINS": "https://a.example, ,https://b.example,"}, dotenv=False)
    assert settings.allowed_origins == ("https://a.example", "https://b.example")


def test_any_header_variant():
    settings = load_settings({"CORS_ALLOW_ANY_HEADER": "true"}, dotenv=False)
    assert settings.allowed_headers is None


@pytest.mark.parametrize("raw", ["0", "-1", "soon"])
def test_connect_timeout_must_be_positive_number(raw):
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings({"DB_CONNECT_TIMEOUT": raw}, dotenv=False)
    assert exc_info.value.key == "DB_CONNECT_TIMEOUT"


def test_log_level_is_validated():
    assert load_settings({"LOG_LEVEL": "debug"}, dotenv=False).log_level == "DEBUG"
    with pytest.raises(ConfigurationError):
        load_settings({"LOG_LEVEL": "chatty"}, dotenv=False)


def test_settings_are_immutable():
    settings = load_settings({}, dotenv=False)
    with pytest.raises(ValidationError):
        settings.port = 1234
