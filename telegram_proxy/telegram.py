import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .cancellation import CancelToken
from .constants import TELEGRAM_API_URL
from .exceptions import (
    DeliveryConstructionError,
    DeliveryError,
    DeliveryRemoteRejected,
    DeliveryTransportError,
)
from .formatters import FormattedMessage, format_message
from .notification import Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryOutcome:
    delivered: bool
    reason: Optional[str] = None
    error: Optional[DeliveryError] = None

    @classmethod
    def success(cls) -> "DeliveryOutcome":
        return cls(delivered=True)

    @classmethod
    def failure(cls, error: DeliveryError) -> "DeliveryOutcome":
        return cls(delivered=False, reason=error.reason, error=error)


class _InFlightSend:
    """Um envio HTTP rodando numa thread daemon.

    A thread lê a resposta inteira (stream=True + content) para que nenhum I/O
    fique para a thread chamadora. abandon() fecha a resposta, já recebida ou
    ainda por vir, exatamente uma vez.
    """

    def __init__(self, session: requests.Session, prepared: requests.PreparedRequest, timeout: Optional[float]):
        self.wakeup = threading.Event()
        self.finished = False
        self.response: Optional[requests.Response] = None
        self.error: Optional[Exception] = None
        self._abandoned = False
        self._lock = threading.Lock()
        self._thread = threading.Thread(
            target=self._run,
            args=(session, prepared, timeout),
            name="telegram-send",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def _run(self, session, prepared, timeout) -> None:
        resp, error = None, None
        try:
            # redirects não são seguidos: 3xx já conta como entregue
            resp = session.send(prepared, timeout=timeout, allow_redirects=False, stream=True)
            resp.content
        except Exception as exc:  # repassada para a thread chamadora
            error = exc
            if resp is not None:
                resp.close()
                resp = None

        with self._lock:
            if self._abandoned:
                if resp is not None:
                    resp.close()
            else:
                self.response, self.error = resp, error
                self.finished = True
        self.wakeup.set()

    def abandon(self) -> None:
        with self._lock:
            self._abandoned = True
            resp, self.response = self.response, None
        if resp is not None:
            resp.close()


class TelegramClient:
    """Cliente da Bot API do Telegram para o método sendMessage.

    Uma única tentativa por chamada, sem retry. Sem session explícita, cada
    thread chamadora usa sua própria requests.Session, já que o requests não
    garante que uma Session seja segura entre threads. Uma session passada
    pelo chamador é usada como está.
    """

    def __init__(self, session: Optional[requests.Session], bot_token: str, chat_id: str, api_url: str = TELEGRAM_API_URL):
        self.session = session
        self.chat_id = chat_id
        self._bot_token = bot_token
        self._local = threading.local()
        self.base_url = f"{api_url.rstrip('/')}/bot{bot_token}"

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None, api_url: str = TELEGRAM_API_URL) -> "TelegramClient":
        return cls(
            session,
            config.telegram_bot_token,
            config.telegram_chat_id,
            api_url=api_url,
        )

    # ---------- Helpers ----------

    def _get_session(self) -> requests.Session:
        if self.session is not None:
            return self.session
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def _redact(self, text: Any) -> str:
        # o token faz parte da URL e pode vazar em mensagens de erro
        text = str(text)
        if self._bot_token:
            text = text.replace(self._bot_token, '***')
        return text

    def _build_request(self, message: FormattedMessage) -> requests.PreparedRequest:
        payload = {
            "chat_id": self.chat_id,
            "text": message.text,
            "parse_mode": message.parse_mode,
        }
        try:
            return requests.Request(
                'POST',
                f"{self.base_url}/sendMessage",
                headers={"Content-Type": "application/json"},
                json=payload,
            ).prepare()
        except (requests.RequestException, ValueError, TypeError) as exc:
            logger.error(f"Erro ao montar requisição HTTP para o Telegram: {self._redact(exc)}")
            raise DeliveryConstructionError(f"error creating http request instance: {self._redact(exc)}") from exc

    @staticmethod
    def _decode_error_body(resp: requests.Response) -> Optional[Any]:
        try:
            return resp.json()
        except ValueError as exc:
            logger.error(f"Erro ao decodificar corpo da resposta de erro (status {resp.status_code}): {exc}")
            return None

    # ---------- Public API ----------

    def send_message(self, message: FormattedMessage, cancel_token: Optional[CancelToken] = None) -> None:
        """Envia a mensagem; levanta uma subclasse de DeliveryError em caso de falha.

        O envio roda numa thread de trabalho e a thread chamadora espera até a
        resposta completa chegar ou o cancel_token disparar (cancel() ou
        deadline). No cancelamento a resposta é abandonada e fechada, e a
        falha é de transporte.
        """
        prepared = self._build_request(message)

        timeout = cancel_token.remaining() if cancel_token is not None else None
        if cancel_token is not None and (cancel_token.cancelled or timeout == 0):
            logger.error("Requisição cancelada antes do envio ao Telegram")
            raise DeliveryTransportError("request cancelled before sending")

        in_flight = _InFlightSend(self._get_session(), prepared, timeout)
        if cancel_token is not None:
            cancel_token.add_callback(in_flight.wakeup.set)
        try:
            in_flight.start()
            in_flight.wakeup.wait(timeout)
        finally:
            if cancel_token is not None:
                cancel_token.remove_callback(in_flight.wakeup.set)

        if not in_flight.finished or (cancel_token is not None and cancel_token.cancelled):
            in_flight.abandon()
            logger.error("Requisição cancelada durante o envio ao Telegram")
            raise DeliveryTransportError("request cancelled while waiting for telegram")

        if in_flight.error is not None:
            exc = in_flight.error
            if not isinstance(exc, requests.RequestException):
                raise exc
            logger.error(f"Erro na requisição HTTP ao Telegram: {self._redact(exc)}")
            raise DeliveryTransportError(f"error making telegram HTTP request: {self._redact(exc)}") from exc

        resp = in_flight.response
        try:
            if resp.status_code < 200 or resp.status_code >= 400:
                body = self._decode_error_body(resp)
                logger.error(f"Status inválido da Bot API do Telegram: status={resp.status_code} body={body}")
                raise DeliveryRemoteRejected(resp.status_code, body)
        finally:
            resp.close()

    def deliver(self, message: FormattedMessage, cancel_token: Optional[CancelToken] = None) -> DeliveryOutcome:
        try:
            self.send_message(message, cancel_token)
        except DeliveryError as exc:
            return DeliveryOutcome.failure(exc)
        return DeliveryOutcome.success()

    def send_notification_message(self, notification: Notification, cancel_token: Optional[CancelToken] = None) -> DeliveryOutcome:
        return self.deliver(format_message(notification), cancel_token)
