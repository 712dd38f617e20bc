from typing import Any, Optional


class ProxyError(Exception):
    """Base de todos os erros do proxy."""


class ConfigError(ProxyError):
    """Configuração obrigatória ausente. Fatal apenas na inicialização."""


class ParseError(ProxyError):
    """Payload recebido malformado, incompleto ou com `_time` inválido."""


class DeliveryError(ProxyError):
    """Falha ao entregar a mensagem ao Telegram."""

    reason = "unknown"


class DeliveryConstructionError(DeliveryError):
    reason = "construction"


class DeliveryTransportError(DeliveryError):
    reason = "transport"


class DeliveryRemoteRejected(DeliveryError):
    reason = "remote_rejected"

    def __init__(self, status_code: int, body: Optional[Any] = None):
        super().__init__(f"telegram API bad status: {status_code}")
        self.status_code = status_code
        # Apenas para diagnóstico, nunca usado para montar a resposta
        self.body = body
