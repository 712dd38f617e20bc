import json
import logging

from flask import Flask, Response, request

from .cancellation import CancelToken
from .constants import (
    MSG_PARSE_ERROR,
    MSG_SEND_ERROR,
    MSG_SENT,
    REQUEST_TIMEOUT_SECONDS,
    SERVICE_NAME,
)
from .exceptions import ParseError
from .parser import parse_notification

logger = logging.getLogger(__name__)


def json_response(status, payload):
    # O status já está definido; falha ao serializar o corpo não altera o status
    try:
        body = json.dumps(payload)
    except (TypeError, ValueError) as exc:
        logger.error(f"Erro ao escrever resposta JSON: {exc}")
        body = ''
    return Response(body, status=status, mimetype='application/json')


def create_app(telegram_client, request_timeout=REQUEST_TIMEOUT_SECONDS):
    app = Flask(__name__)

    @app.route('/health', methods=['GET'])
    def health():
        return json_response(200, {'status': 'ok', 'service': SERVICE_NAME})

    @app.route('/', methods=['POST'])
    def notify():
        # Cada requisição tem seu próprio token; nada é compartilhado entre threads
        cancel_token = CancelToken(timeout=request_timeout)

        try:
            notification = parse_notification(request.get_data())
        except ParseError:
            return json_response(400, {'error': MSG_PARSE_ERROR})

        logger.info(
            f"Notificação recebida: check_id={notification.check_id} "
            f"check_name={notification.check_name} level={notification.level} type={notification.type}"
        )

        outcome = telegram_client.send_notification_message(notification, cancel_token)
        if not outcome.delivered:
            logger.info(f"Erro ao enviar para o Telegram ({outcome.reason}): {outcome.error}")
            return json_response(500, {'error': MSG_SEND_ERROR})

        return json_response(200, {'message': MSG_SENT})

    return app
