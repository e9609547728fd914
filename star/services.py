from typing import Optional

import requests
import structlog

from .constants import DEFAULT_TELEGRAM_API_URL, DEFAULT_TELEGRAM_TIMEOUT_SECONDS
from .formatters import FormatMode, OutboundMessage

logger = structlog.get_logger(__name__)

_PARSE_MODES = {
    FormatMode.MARKDOWN: "Markdown",
}


class NotificationError(Exception):
    """Falha ao entregar a mensagem no Telegram."""


class TelegramClient:
    """Cliente mínimo da Bot API do Telegram.

    Uma instância é compartilhada por todas as requests; depois de criada não é
    mais alterada. Toda chamada usa ``timeout`` explícito.
    """

    def __init__(self, token: str, api_url: str = DEFAULT_TELEGRAM_API_URL,
                 timeout: float = DEFAULT_TELEGRAM_TIMEOUT_SECONDS, debug: bool = False,
                 session: Optional[requests.Session] = None):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.token)

    def _call(self, method: str, payload: Optional[dict] = None) -> dict:
        if not self.enabled:
            raise NotificationError("Telegram token not set")

        url = f"{self.api_url}/bot{self.token}/{method}"
        try:
            resp = self.session.post(url, json=payload or {}, timeout=self.timeout)
        except requests.RequestException as exc:
            # Nunca loga a URL: ela contém o token
            raise NotificationError(f"{method}: {exc.__class__.__name__}") from exc

        if self.debug:
            logger.debug("Telegram response", method=method, status_code=resp.status_code, body=resp.text[:500])

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400 or not data.get("ok", False):
            description = data.get("description") or resp.reason or "unknown error"
            raise NotificationError(f"{method}: {resp.status_code} {description}")
        return data.get("result") or {}

    def get_me(self) -> dict:
        return self._call("getMe")

    def send_message(self, message: OutboundMessage) -> dict:
        payload = {"chat_id": message.chat_id, "text": message.text}
        parse_mode = _PARSE_MODES.get(message.format_mode)
        if parse_mode:
            payload["parse_mode"] = parse_mode
        return self._call("sendMessage", payload)
