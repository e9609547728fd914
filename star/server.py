import os
import sys

import structlog
from werkzeug.serving import WSGIRequestHandler, make_server

from .config import ConfigError, load_config, notification_warnings
from .constants import SERVER_SOCKET_TIMEOUT_SECONDS
from .controller import create_app
from .logs import configure_logging
from .services import NotificationError, TelegramClient
from .utils import parse_bool

logger = structlog.get_logger(__name__)


class TimeoutRequestHandler(WSGIRequestHandler):
    # StreamRequestHandler aplica este timeout no socket (leitura e escrita)
    timeout = SERVER_SOCKET_TIMEOUT_SECONDS


def build_server(app, config):
    return make_server(
        config.listen,
        config.port,
        app,
        threaded=True,
        request_handler=TimeoutRequestHandler,
    )


def check_bot(client: TelegramClient) -> None:
    if not client.enabled:
        return
    try:
        me = client.get_me()
        logger.info("Telegram bot connected", username=me.get("username"))
    except NotificationError as exc:
        logger.error("Bot can't connect", error=str(exc))


def main(argv=None, environ=None) -> int:
    env = os.environ if environ is None else environ
    configure_logging(
        debug=parse_bool(env.get("DEBUG_MODE")),
        pretty=parse_bool(env.get("LOG_PRETTY"), default=True),
    )

    try:
        config = load_config(argv, env)
    except ConfigError as exc:
        logger.critical(str(exc))
        return 1

    logger.info("Init Star", version=config.version)
    for problem in notification_warnings(config):
        logger.error(problem)

    client = TelegramClient(
        config.telegram_token,
        api_url=config.telegram_api_url,
        timeout=config.telegram_timeout,
        debug=config.debug,
    )
    check_bot(client)
    app = create_app(config, notifier=client)

    try:
        server = build_server(app, config)
    except OSError as exc:
        logger.critical("Server err", address=config.address, error=str(exc))
        return 1

    logger.info("Serve at", address=config.address)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


def run():
    sys.exit(main())
