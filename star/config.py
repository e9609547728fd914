import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from . import __version__
from .constants import (
    DEFAULT_LISTEN,
    DEFAULT_PORT,
    DEFAULT_TELEGRAM_API_URL,
    DEFAULT_TELEGRAM_TIMEOUT_SECONDS,
)
from .utils import parse_bool


class ConfigError(Exception):
    """Configuração inválida; o processo não deve subir."""


@dataclass(frozen=True)
class ServerConfig:
    webhook_secret: str
    listen: str = DEFAULT_LISTEN
    port: int = DEFAULT_PORT
    telegram_token: str = ""
    telegram_chat_id: int = 0
    version: str = __version__
    telegram_api_url: str = DEFAULT_TELEGRAM_API_URL
    telegram_timeout: float = DEFAULT_TELEGRAM_TIMEOUT_SECONDS
    debug: bool = False
    log_pretty: bool = True

    @property
    def address(self) -> str:
        return f"{self.listen}:{self.port}"


def build_parser(version: str = __version__) -> argparse.ArgumentParser:
    # Flags no estilo "-port 9000", com aliases "--port"
    parser = argparse.ArgumentParser(
        prog="star",
        description="Recebe webhooks de star do GitHub e notifica um chat do Telegram.",
        add_help=False,
    )
    parser.add_argument("-port", "--port", dest="port", default=None,
                        help=f"Port to listen on for HTTP (env PORT, default {DEFAULT_PORT})")
    parser.add_argument("-listen", "--listen", dest="listen", default=None,
                        help=f"IPv4 address to listen on (env LISTEN, default {DEFAULT_LISTEN})")
    parser.add_argument("-v", "--version", action="version", version=version,
                        help="Print version")
    parser.add_argument("-h", "-help", "--help", action="help",
                        help="Get Help")
    return parser


def _parse_port(raw) -> int:
    try:
        port = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"Porta inválida: {raw!r}")
    if not 0 <= port <= 65535:
        raise ConfigError(f"Porta fora do intervalo: {port}")
    return port


def parse_chat_id(raw: Optional[str]) -> int:
    # Mesmo comportamento de antes: valor inválido vira 0
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return 0


def _parse_timeout(raw) -> float:
    if raw is None or str(raw).strip() == "":
        return float(DEFAULT_TELEGRAM_TIMEOUT_SECONDS)
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"TELEGRAM_TIMEOUT_SECONDS inválido: {raw!r}")
    if timeout <= 0:
        raise ConfigError("TELEGRAM_TIMEOUT_SECONDS deve ser maior que zero")
    return timeout


def load_config(argv: Optional[Sequence[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """Monta o ServerConfig a partir das flags e do ambiente.

    A flag vence quando informada explicitamente. ``-v`` e ``-help`` encerram
    o processo com status 0 (via argparse).
    """
    env = os.environ if environ is None else environ
    version = env.get("VERSION") or __version__
    args = build_parser(version).parse_args(argv)

    secret = env.get("GITHUB_SECRET", "")
    if not secret:
        raise ConfigError("Github webhook secret not set")

    port_raw = args.port if args.port is not None else (env.get("PORT") or DEFAULT_PORT)
    listen = args.listen if args.listen is not None else (env.get("LISTEN") or DEFAULT_LISTEN)

    return ServerConfig(
        webhook_secret=secret,
        listen=listen,
        port=_parse_port(port_raw),
        telegram_token=env.get("TELEGRAM_TOKEN", ""),
        telegram_chat_id=parse_chat_id(env.get("TELEGRAM_CHAT", "")),
        version=version,
        telegram_api_url=(env.get("TELEGRAM_API_URL") or DEFAULT_TELEGRAM_API_URL).rstrip("/"),
        telegram_timeout=_parse_timeout(env.get("TELEGRAM_TIMEOUT_SECONDS")),
        debug=parse_bool(env.get("DEBUG_MODE"), default=False),
        log_pretty=parse_bool(env.get("LOG_PRETTY"), default=True),
    )


def notification_warnings(config: ServerConfig):
    """Lista problemas não fatais da configuração do Telegram."""
    problems = []
    if not config.telegram_token:
        problems.append("Telegram token not set")
    if not config.telegram_chat_id:
        problems.append("Telegram Chat ID not set")
    return problems
