"""Validação e decodificação dos webhooks do GitHub.

Só o evento ``watch`` (repositório recebeu uma star) é decodificado. Os demais
eventos com assinatura válida retornam ``None`` e são ignorados pelo handler.
Para suportar outro evento basta criar a dataclass, registrar em
``EVENT_TYPES`` e tratar o novo tipo no controller.
"""

import hashlib
import hmac
import json
from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Type, Union

from .constants import HEADER_GITHUB_EVENT, HEADER_SIGNATURE_256, HEADER_SIGNATURE_SHA1


class WebhookError(Exception):
    """Webhook rejeitado (assinatura ou payload)."""


class SignatureError(WebhookError):
    pass


class MissingEventError(WebhookError):
    pass


class PayloadError(WebhookError):
    pass


@dataclass(frozen=True)
class WatchEvent:
    kind: ClassVar[str] = "watch"

    repository_name: str
    star_count: int
    sender_profile_url: str

    @classmethod
    def from_payload(cls, payload) -> "WatchEvent":
        try:
            repository = payload["repository"]
            sender = payload["sender"]
            name = repository["name"]
            count = repository["stargazers_count"]
            sender_url = sender["html_url"]
        except (KeyError, TypeError) as exc:
            raise PayloadError(f"campo ausente no payload watch: {exc}")

        if not isinstance(name, str) or not isinstance(sender_url, str):
            raise PayloadError("repository.name e sender.html_url devem ser strings")
        # bool é subclasse de int no Python
        if isinstance(count, bool) or not isinstance(count, int):
            raise PayloadError("repository.stargazers_count deve ser inteiro")

        return cls(repository_name=name, star_count=count, sender_profile_url=sender_url)


InboundEvent = Union[WatchEvent]

EVENT_TYPES: Dict[str, Type[WatchEvent]] = {
    WatchEvent.kind: WatchEvent,
}

_SIGNATURE_SCHEMES = (
    (HEADER_SIGNATURE_256, "sha256", hashlib.sha256),
    (HEADER_SIGNATURE_SHA1, "sha1", hashlib.sha1),
)


def sign(secret: str, body: bytes, algorithm: str = "sha256") -> str:
    """Calcula o valor do header de assinatura, ex.: ``sha256=<hex>``."""
    digest = hmac.new(secret.encode("utf-8"), body, algorithm).hexdigest()
    return f"{algorithm}={digest}"


def verify_signature(secret: str, headers, body: bytes) -> None:
    # Prefere X-Hub-Signature-256; aceita o legado X-Hub-Signature (sha1)
    for header, prefix, digestmod in _SIGNATURE_SCHEMES:
        received = headers.get(header)
        if not received:
            continue
        algorithm, _, signature = received.partition("=")
        signature = signature.strip().lower()
        if algorithm != prefix or not signature or not signature.isascii():
            raise SignatureError(f"formato de assinatura inválido em {header}")
        expected = hmac.new(secret.encode("utf-8"), body, digestmod).hexdigest()
        if not hmac.compare_digest(expected, signature):
            raise SignatureError("HMAC verification failed")
        return
    raise SignatureError("missing X-Hub-Signature header")


def parse_webhook(secret: str, headers, body: bytes) -> Optional[InboundEvent]:
    verify_signature(secret, headers, body)

    event_type = headers.get(HEADER_GITHUB_EVENT)
    if not event_type:
        raise MissingEventError("missing X-GitHub-Event header")

    event_cls = EVENT_TYPES.get(event_type)
    if event_cls is None:
        return None

    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, ValueError) as exc:
        raise PayloadError(f"payload não é JSON válido: {exc}")
    if not isinstance(payload, dict):
        raise PayloadError("payload deve ser um objeto JSON")

    return event_cls.from_payload(payload)
