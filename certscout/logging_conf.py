"""Root logging setup for the CertScout server.

Tool arguments can carry whole certificate stores (PEM text, or raw
base64 of PKCS#12/DER files), so every record passes through ``_Redact``
before it reaches a handler.
"""
import json
import logging
import os
import re
from typing import Any

from .settings import Settings

_CONFIGURED_FLAG = "_certscout_configured"
_PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"

_PEM_PRIV = re.compile(
    r"-----BEGIN [A-Z0-9 ]*PRIVATE KEY-----.*?-----END [A-Z0-9 ]*PRIVATE KEY-----",
    re.DOTALL,
)
# content_b64=..., "content_b64": "...", content_b64: ...
_B64_ARG = re.compile(r"""(content_b64["']?\s*[:=]\s*["']?)[A-Za-z0-9+/=_-]+""")
# Hex digests (64 chars) stay readable; encoded file bodies are far longer.
_B64_RUN = re.compile(r"[A-Za-z0-9+/]{120,}={0,2}")
_SECRET_KV = re.compile(r"(pass(?:word|phrase)?|storepass|token|secret|api[_-]?key)\s*=\s*([^\s,;]+)", re.IGNORECASE)


def redact(text: str) -> str:
    text = _PEM_PRIV.sub("[REDACTED-PRIVATE-KEY]", text)
    text = _B64_ARG.sub(r"\1[REDACTED-B64]", text)
    text = _B64_RUN.sub("[REDACTED-B64]", text)
    return _SECRET_KV.sub(lambda m: f"{m.group(1)}=[REDACTED]", text)


class _Redact(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # Redact the rendered message so %-style args are covered too.
        try:
            rendered = record.getMessage()
        except (TypeError, ValueError):
            return True
        cleaned = redact(rendered)
        if cleaned != rendered or record.args:
            record.msg, record.args = cleaned, None
        return True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False)


def _json_from_env() -> bool:
    return os.getenv("CERTSCOUT_LOG_JSON", "false").lower() in ("1", "true", "yes")


def setup_logging(settings: Settings, json_mode: bool | None = None) -> None:
    """Install one redacting stderr handler on the root logger. Safe to call twice."""
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG, False):
        return

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.addFilter(_Redact())
    use_json = _json_from_env() if json_mode is None else json_mode
    handler.setFormatter(_JsonFormatter() if use_json else logging.Formatter(_PLAIN_FORMAT))
    root.addHandler(handler)

    setattr(root, _CONFIGURED_FLAG, True)
