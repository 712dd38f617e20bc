import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Dict

from .exceptions import ParseError
from .notification import Notification

logger = logging.getLogger(__name__)

# Campos do JSON do InfluxDB -> atributos da Notification
FIELD_MAP = {
    '_check_id': 'check_id',
    '_check_name': 'check_name',
    '_level': 'level',
    '_message': 'message',
    '_time': 'time',
    '_type': 'type',
}

# RFC 3339 estrito: offset obrigatório ('Z' ou ±HH:MM)
RFC3339_RE = re.compile(
    r'(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?'
    r'(?:(Z)|([+-])(\d{2}):(\d{2}))',
    re.ASCII,
)


def parse_rfc3339(value: str) -> datetime:
    """Converte uma string RFC 3339 em datetime com o offset original.

    Frações além de microssegundos são truncadas.
    """
    match = RFC3339_RE.fullmatch(value)
    if not match:
        raise ValueError(f"invalid RFC3339 time: {value!r}")

    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()

    if zulu:
        tz = timezone.utc
    else:
        off_hours, off_minutes = int(off_h), int(off_m)
        if off_hours > 23 or off_minutes > 59:
            raise ValueError(f"time zone offset out of range: {value!r}")
        offset = timedelta(hours=off_hours, minutes=off_minutes)
        tz = timezone(-offset if sign == '-' else offset)

    microsecond = int(fraction[:6].ljust(6, '0')) if fraction else 0

    # datetime valida os intervalos de data e hora (ValueError)
    return datetime(
        int(year), int(month), int(day),
        int(hour), int(minute), int(second),
        microsecond, tzinfo=tz,
    )


def _decode_object(raw: bytes) -> Dict:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise ParseError(f"request body is not valid UTF-8: {exc}") from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ParseError(f"error unmarshaling request json: {exc}") from exc

    if not isinstance(data, dict):
        raise ParseError(f"request json must be an object, got {type(data).__name__}")
    return data


def parse_notification(raw: bytes) -> Notification:
    """Decodifica o corpo da requisição em uma Notification.

    Qualquer problema (JSON inválido, campo ausente ou não-string, `_time`
    fora do formato) gera ParseError; a causa só vai para o log.
    """
    try:
        data = _decode_object(raw)

        values = {}
        for key, attr in FIELD_MAP.items():
            if key not in data:
                raise ParseError(f"missing field {key}")
            value = data[key]
            if not isinstance(value, str):
                raise ParseError(f"field {key} must be a string, got {type(value).__name__}")
            values[attr] = value

        try:
            values['time'] = parse_rfc3339(values['time'])
        except ValueError as exc:
            raise ParseError(f"error parsing RFC3339 time: {exc}") from exc
    except ParseError as exc:
        logger.error(f"Falha ao interpretar notificação: {exc}")
        raise

    return Notification(**values)
