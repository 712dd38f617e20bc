import threading
import time
from typing import Callable, List, Optional


class CancelToken:
    """Sinal de cancelamento de uma requisição recebida.

    Combina um cancelamento explícito (cancel()) com um deadline opcional,
    em segundos a partir da criação. A chamada ao Telegram espera no máximo
    até este sinal disparar, sem camada extra de timeout.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Registra callback chamado no cancel(); roda na hora se já cancelado."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Segundos até o deadline (0 se expirado), None se não houver deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())
