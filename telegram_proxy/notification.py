from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Notification:
    """Um evento de alerta recebido do InfluxDB, já validado."""

    check_id: str
    check_name: str
    level: str
    message: str
    time: datetime
    type: str
