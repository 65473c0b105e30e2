import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# Telegram rejects messages above this many characters
TELEGRAM_MESSAGE_LIMIT = 4096

DEFAULT_MODEL = 'gemini-1.5-flash'
DEFAULT_SYSTEM_PROMPT = 'You are a helpful and concise assistant.'
DEFAULT_CHUNK_SIZE = 3800  # leaves room for markup overhead


@dataclass(frozen=True)
class Settings:
    telegram_token: str
    google_api_key: str
    preferred_model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    max_chunk_size: int = DEFAULT_CHUNK_SIZE
    log_level: str = 'INFO'


def _optional_number(environ: Mapping[str, str], name: str, cast):
    raw = environ.get(name, '').strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    When no mapping is given, a local .env file is loaded first and
    os.environ is used. Raises ValueError if TELEGRAM_BOT_TOKEN or
    GOOGLE_API_KEY (alias GEMINI_API_KEY) is missing.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    telegram_token = environ.get('TELEGRAM_BOT_TOKEN', '').strip()
    google_api_key = (environ.get('GOOGLE_API_KEY') or environ.get('GEMINI_API_KEY') or '').strip()

    if not telegram_token:
        raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required!")
    if not google_api_key:
        raise ValueError("GOOGLE_API_KEY (or GEMINI_API_KEY) environment variable is required!")

    max_chunk_size = _optional_number(environ, 'MAX_CHUNK_SIZE', int)
    if max_chunk_size is None:
        max_chunk_size = DEFAULT_CHUNK_SIZE
    if not 0 < max_chunk_size < TELEGRAM_MESSAGE_LIMIT:
        raise ValueError(
            f"MAX_CHUNK_SIZE must be between 1 and {TELEGRAM_MESSAGE_LIMIT - 1}, got {max_chunk_size}"
        )

    return Settings(
        telegram_token=telegram_token,
        google_api_key=google_api_key,
        preferred_model=environ.get('GEMINI_MODEL', '').strip() or DEFAULT_MODEL,
        system_prompt=environ.get('SYSTEM_PROMPT', '').strip() or DEFAULT_SYSTEM_PROMPT,
        temperature=_optional_number(environ, 'TEMPERATURE', float),
        max_tokens=_optional_number(environ, 'MAX_TOKENS', int),
        max_chunk_size=max_chunk_size,
        log_level=environ.get('LOG_LEVEL', 'INFO').strip().upper() or 'INFO',
    )
