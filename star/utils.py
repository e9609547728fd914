import math
import socket

from .constants import UNKNOWN


def _is_meaningful(value):
    if value is None:
        return False
    return str(value).strip() != ""


def pick_first_nonempty(*candidates):
    for c in candidates:
        if _is_meaningful(c):
            return str(c).strip()
    return None


def parse_bool(value, default=False):
    if value is None or str(value).strip() == "":
        return default
    return str(value).strip().lower() == "true"


def latency_ms(elapsed_ns: int) -> int:
    # Arredonda para cima: 0.2ms vira 1, nunca 0 para uma request que levou tempo
    return int(math.ceil(elapsed_ns / 1_000_000))


def get_hostname() -> str:
    try:
        return socket.gethostname() or UNKNOWN
    except OSError:
        return UNKNOWN
