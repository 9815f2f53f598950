import pytest

from scmbridge.infrastructure.error_handler import ValidationError
from scmbridge.models import ClientConfig


def test_defaults():
    config = ClientConfig()
    assert config.base_url is None
    assert config.token is None
    assert config.timeout == 30.0
    assert config.default_page_size == 30


def test_trailing_slash_is_stripped():
    assert ClientConfig(base_url="https://try.gitea.io/").base_url == "https://try.gitea.io"


@pytest.mark.parametrize("kwargs", [{"timeout": 0}, {"timeout": -1}, {"default_page_size": 0}])
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        ClientConfig(**kwargs)


def test_from_env(monkeypatch):
    monkeypatch.setenv("SCM_BASE_URL", "https://git.example.com/")
    monkeypatch.setenv("SCM_TOKEN", "abc123")
    monkeypatch.setenv("SCM_TIMEOUT", "5")

    config = ClientConfig.from_env()

    assert config.base_url == "https://git.example.com"
    assert config.token == "abc123"
    assert config.timeout == 5.0


def test_from_env_with_prefix(monkeypatch):
    monkeypatch.delenv("GITEA_BASE_URL", raising=False)
    monkeypatch.delenv("GITEA_TIMEOUT", raising=False)
    monkeypatch.setenv("GITEA_TOKEN", "xyz")

    config = ClientConfig.from_env("GITEA")

    assert config.token == "xyz"
    assert config.base_url is None
    assert config.timeout == 30.0


def test_from_env_rejects_bad_timeout(monkeypatch):
    monkeypatch.setenv("SCM_TIMEOUT", "soon")
    with pytest.raises(ValidationError):
        ClientConfig.from_env()
