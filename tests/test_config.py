import pytest

from config import DEFAULT_CHUNK_SIZE, DEFAULT_MODEL, DEFAULT_SYSTEM_PROMPT, load_settings

REQUIRED = {"TELEGRAM_BOT_TOKEN": "123:abc", "GOOGLE_API_KEY": "key"}


def test_defaults():
    settings = load_settings(dict(REQUIRED))

    assert settings.telegram_token == "123:abc"
    assert settings.google_api_key == "key"
    assert settings.preferred_model == DEFAULT_MODEL
    assert settings.system_prompt == DEFAULT_SYSTEM_PROMPT
    assert settings.max_chunk_size == DEFAULT_CHUNK_SIZE
    assert settings.temperature is None
    assert settings.max_tokens is None
    assert settings.log_level == "INFO"


def test_overrides():
    settings = load_settings({
        **REQUIRED,
        "GEMINI_MODEL": "gemini-1.5-pro",
        "TEMPERATURE": "0.3",
        "MAX_TOKENS": "256",
        "MAX_CHUNK_SIZE": "2000",
        "LOG_LEVEL": "debug",
    })

    assert settings.preferred_model == "gemini-1.5-pro"
    assert settings.temperature == 0.3
    assert settings.max_tokens == 256
    assert settings.max_chunk_size == 2000
    assert settings.log_level == "DEBUG"


def test_gemini_api_key_alias():
    settings = load_settings({"TELEGRAM_BOT_TOKEN": "t", "GEMINI_API_KEY": "alias"})

    assert settings.google_api_key == "alias"


@pytest.mark.parametrize("missing", ["TELEGRAM_BOT_TOKEN", "GOOGLE_API_KEY"])
def test_missing_secret_refuses_to_start(missing):
    environ = dict(REQUIRED)
    del environ[missing]

    with pytest.raises(ValueError, match=missing):
        load_settings(environ)


@pytest.mark.parametrize("size", ["0", "4096", "-1"])
def test_chunk_size_must_fit_telegram_limit(size):
    with pytest.raises(ValueError, match="MAX_CHUNK_SIZE"):
        load_settings({**REQUIRED, "MAX_CHUNK_SIZE": size})


def test_malformed_number():
    with pytest.raises(ValueError, match="TEMPERATURE"):
        load_settings({**REQUIRED, "TEMPERATURE": "warm"})


def test_reads_os_environ(monkeypatch):
    monkeypatch.setattr("config.load_dotenv", lambda: False)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "from-env")
    monkeypatch.setenv("GOOGLE_API_KEY", "env-key")
    monkeypatch.delenv("GEMINI_MODEL", raising=False)

    settings = load_settings()

    assert settings.telegram_token == "from-env"
    assert settings.google_api_key == "env-key"


def test_malformed_number_keeps_parse_error_as_cause():
    with pytest.raises(ValueError) as excinfo:
        load_settings({**REQUIRED, "MAX_TOKENS": "lots"})

    assert "MAX_TOKENS must be a number" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ValueError)
