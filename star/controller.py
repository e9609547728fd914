from flask import Flask, jsonify, request

import structlog

from .access_log import AccessLogMiddleware
from .config import ServerConfig
from .constants import HEADER_GITHUB_EVENT, HEALTH_OK, UNKNOWN, WEBHOOK_ACK_GENERIC, WEBHOOK_ACK_SENT
from .formatters import build_watch_message
from .services import NotificationError, TelegramClient
from .tracing import TracingMiddleware, get_request_context
from .webhook import WatchEvent, WebhookError, parse_webhook

logger = structlog.get_logger(__name__)


def _request_id():
    ctx = get_request_context(request.environ)
    return ctx.request_id if ctx is not None else UNKNOWN


def create_app(config: ServerConfig, notifier=None):
    app = Flask(__name__)
    if notifier is None:
        notifier = TelegramClient(
            config.telegram_token,
            api_url=config.telegram_api_url,
            timeout=config.telegram_timeout,
            debug=config.debug,
        )

    @app.route('/version', methods=['GET'])
    def version():
        return jsonify({"version": config.version}), 200

    @app.route('/health', methods=['GET'])
    def health():
        return _text(HEALTH_OK)

    @app.route('/webhook', methods=['POST'])
    def webhook():
        event_header = request.headers.get(HEADER_GITHUB_EVENT, "")
        try:
            event = parse_webhook(config.webhook_secret, request.headers, request.get_data())
        except WebhookError as exc:
            # Falhas de validação não viram 4xx: o GitHub só vê 200
            logger.error("Webhook rejected", github_event=event_header, error=str(exc), request_id=_request_id())
            return _text(WEBHOOK_ACK_GENERIC)

        if isinstance(event, WatchEvent):
            handle_watch(event)
            return _text(WEBHOOK_ACK_SENT)

        return _text(WEBHOOK_ACK_GENERIC)

    def handle_watch(event: WatchEvent):
        logger.info("Is Watch request", repository=event.repository_name, stars=event.star_count,
                    request_id=_request_id())
        message = build_watch_message(event, config.telegram_chat_id)
        try:
            notifier.send_message(message)
        except NotificationError as exc:
            logger.error("Message can't send", error=str(exc), chat_id=message.chat_id, request_id=_request_id())

    app.wsgi_app = TracingMiddleware(AccessLogMiddleware(app.wsgi_app))
    return app


def _text(text):
    return text, 200, {"Content-Type": "text/plain; charset=utf-8"}
