import logging
import sys

from telegram_proxy.config import load_config
from telegram_proxy.constants import APP_PORT, DEBUG_MODE, LOG_LEVEL, TELEGRAM_API_URL
from telegram_proxy.controller import create_app
from telegram_proxy.exceptions import ConfigError
from telegram_proxy.telegram import TelegramClient

logging.basicConfig(
    level=logging.DEBUG if DEBUG_MODE else getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger('influx-telegram-proxy')

try:
    config = load_config()
except ConfigError as exc:
    logger.critical(f"Erro ao ler variáveis de ambiente: {exc}")
    sys.exit(1)

telegram_client = TelegramClient.from_config(config, api_url=TELEGRAM_API_URL)
app = create_app(telegram_client)


if __name__ == '__main__':
    # threaded=True: uma thread por requisição; cada uma com sua requests.Session
    app.run(host='0.0.0.0', port=APP_PORT, debug=DEBUG_MODE, threaded=True, use_reloader=False)
