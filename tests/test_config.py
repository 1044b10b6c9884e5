import pytest

from cyberfish.config import load_config


def test_defaults():
    config = load_config({})
    assert config.client.api_url == "http://localhost:3000"
    assert config.client.timeout_s == 5.0
    assert config.client.check_name is True
    assert config.server.port == 3000
    assert config.server.db_file == "cyberfish.db"
    assert config.log_level == "info"
    assert config.log_file is None


def test_overrides():
    config = load_config({
        "CYBERFISH_API_URL": "https://scores.example.com/",
        "CYBERFISH_TIMEOUT_S": "2.5",
        "CYBERFISH_CHECK_NAME": "off",
        "PORT": "8080",
        "LOG_FILE": "fish.log",
    })
    assert config.client.api_url == "https://scores.example.com"
    assert config.client.timeout_s == 2.5
    assert config.client.check_name is False
    assert config.server.port == 8080
    assert config.log_file == "fish.log"


@pytest.mark.parametrize("env", [
    {"CYBERFISH_TIMEOUT_S": "soon"},
    {"CYBERFISH_TIMEOUT_S": "0"},
    {"PORT": "-1"},
    {"CYBERFISH_CHECK_NAME": "maybe"},
])
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_config(env)
