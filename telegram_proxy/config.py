import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigError


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    telegram_chat_id: str

    def __repr__(self) -> str:
        # o token nunca deve aparecer em logs
        return f"Config(telegram_bot_token='***', telegram_chat_id={self.telegram_chat_id!r})"


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Lê TELEGRAM_BOT_TOKEN e TELEGRAM_CHAT_ID do ambiente.

    Apenas a presença das variáveis é verificada; valor vazio é aceito.
    """
    env = os.environ if environ is None else environ

    if "TELEGRAM_BOT_TOKEN" not in env:
        raise ConfigError("missing TELEGRAM_BOT_TOKEN env var")
    if "TELEGRAM_CHAT_ID" not in env:
        raise ConfigError("missing TELEGRAM_CHAT_ID env var")

    return Config(
        telegram_bot_token=env["TELEGRAM_BOT_TOKEN"],
        telegram_chat_id=env["TELEGRAM_CHAT_ID"],
    )
