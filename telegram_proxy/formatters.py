from dataclasses import dataclass
from datetime import datetime, timedelta

from .constants import TELEGRAM_PARSE_MODE
from .notification import Notification


@dataclass(frozen=True)
class FormattedMessage:
    text: str
    parse_mode: str = TELEGRAM_PARSE_MODE


def markdown_safe(text: str) -> str:
    """Escapa o texto para o modo MarkdownV2 da Bot API.

    Segundo a documentação oficial (https://core.telegram.org/bots/api#markdownv2-style):
    qualquer caractere com código entre 1 e 126 pode ser escapado em qualquer
    lugar com um '\\' antes, e passa a ser tratado como caractere comum.
    Códigos acima de 126 não têm significado de markup e passam intactos.
    """
    safe = []
    for ch in text:
        if 1 <= ord(ch) <= 126:
            safe.append('\\')
        safe.append(ch)
    return ''.join(safe)


def markdown_bold(text: str) -> str:
    return '*' + markdown_safe(text) + '*'


def format_rfc3339(value: datetime) -> str:
    """Formato RFC 3339 sem fração de segundos; offset zero vira 'Z'."""
    base = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    offset = value.utcoffset()
    if not offset:
        return base + 'Z'

    sign = '+'
    if offset < timedelta(0):
        sign = '-'
        offset = -offset
    minutes = int(offset.total_seconds()) // 60
    return f"{base}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_message(notification: Notification) -> FormattedMessage:
    text = "{} on {} at {}\n\n{}".format(
        markdown_bold(notification.level.upper()),
        markdown_safe(notification.check_name),
        markdown_safe(format_rfc3339(notification.time)),
        markdown_safe(notification.message),
    )
    return FormattedMessage(text=text)
