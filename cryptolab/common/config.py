"""Environment configuration (.env aware) and logging setup."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from cryptolab.common.errors import InvalidInput
from cryptolab.crypto.keys import DEFAULT_RSA_KEY_SIZE, MIN_RSA_KEY_SIZE

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    rsa_key_size: int = DEFAULT_RSA_KEY_SIZE
    coprime_limit: int = 5
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidInput(f"{name} must be an integer, got '{raw}'") from e


def load_env() -> Settings:
    """
    Read settings from the process environment (and a .env file if present).

    CRYPTOLAB_RSA_KEY_SIZE   chat-demo RSA modulus bits (default 2048)
    CRYPTOLAB_COPRIME_LIMIT  e candidates offered by the RSA walkthrough (default 5)
    CRYPTOLAB_LOG_LEVEL      logging level name (default INFO)
    """
    load_dotenv()

    rsa_key_size = _int_env("CRYPTOLAB_RSA_KEY_SIZE", DEFAULT_RSA_KEY_SIZE)
    coprime_limit = _int_env("CRYPTOLAB_COPRIME_LIMIT", 5)
    log_level = os.getenv("CRYPTOLAB_LOG_LEVEL", "INFO").upper()

    if rsa_key_size < MIN_RSA_KEY_SIZE:
        raise InvalidInput(f"CRYPTOLAB_RSA_KEY_SIZE must be at least {MIN_RSA_KEY_SIZE}")
    if coprime_limit < 1:
        raise InvalidInput("CRYPTOLAB_COPRIME_LIMIT must be positive")
    if not isinstance(logging.getLevelName(log_level), int):
        raise InvalidInput(f"Unknown CRYPTOLAB_LOG_LEVEL '{log_level}'")

    return Settings(
        rsa_key_size=rsa_key_size,
        coprime_limit=coprime_limit,
        log_level=log_level,
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.debug("[CONFIG] rsa_key_size=%d coprime_limit=%d",
                 settings.rsa_key_size, settings.coprime_limit)
