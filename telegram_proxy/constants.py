import os

# Configurações globais de ambiente (opcionais)
APP_PORT = int(os.getenv("APP_PORT", "8080"))
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Deadline de cada requisição recebida; a chamada ao Telegram herda esse prazo
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

TELEGRAM_API_URL = os.getenv("TELEGRAM_API_URL", "https://api.telegram.org").rstrip("/")
TELEGRAM_PARSE_MODE = "MarkdownV2"

SERVICE_NAME = "influx-telegram-proxy"

# Corpos de resposta expostos ao chamador
MSG_PARSE_ERROR = "request parse error"
MSG_SEND_ERROR = "telegram send error"
MSG_SENT = "sent to telegram"
