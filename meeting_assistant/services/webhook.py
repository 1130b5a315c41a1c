"""Recall webhook verification and event logging.

Recall delivers webhooks through Svix: the signature is
``v1,<base64 HMAC-SHA256>`` over ``{msg_id}.{timestamp}.{body}``, keyed with
the base64 part of a ``whsec_...`` secret.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
from typing import Optional, Union

_logger = logging.getLogger("meeting_assistant.webhook")


def _secret_key(secret: str) -> Optional[bytes]:
    encoded = secret.split("_", 1)[1] if "_" in secret else secret
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return None


def compute_signature(
    secret: str, msg_id: str, timestamp: str, body: Union[bytes, str]
) -> Optional[str]:
    """Return the expected ``v1,...`` signature, or None if the secret is malformed.

    ``body`` is signed as the exact bytes received; text is encoded as UTF-8.
    """
    key = _secret_key(secret)
    if key is None:
        return None
    if isinstance(body, str):
        body = body.encode("utf-8")
    signed_content = f"{msg_id}.{timestamp}.".encode("utf-8") + body
    digest = hmac.new(key, signed_content, hashlib.sha256).digest()
    return "v1," + base64.b64encode(digest).decode("ascii")


def verify_signature(
    secret: str,
    msg_id: Optional[str],
    timestamp: Optional[str],
    body: Union[bytes, str],
    signature_header: Optional[str],
) -> bool:
    if not (msg_id and timestamp and signature_header):
        _logger.warning("Webhook missing signature headers")
        return False
    expected = compute_signature(secret, msg_id, timestamp, body)
    if expected is None:
        _logger.error("WEBHOOK_SECRET is not valid base64")
        return False
    # Header holds space-separated candidates (one per active secret)
    expected_bytes = expected.encode("ascii")
    return any(
        hmac.compare_digest(candidate.encode("utf-8"), expected_bytes)
        for candidate in signature_header.split()
    )


def _participant_name(data: dict) -> str:
    inner = data.get("data") if isinstance(data.get("data"), dict) else {}
    participant = inner.get("participant") if isinstance(inner.get("participant"), dict) else {}
    return participant.get("name") or "Unknown"


def log_event(payload: dict, msg_id: Optional[str] = None) -> str:
    """Log a recognized webhook event and return its name. Nothing is persisted."""
    event = payload.get("event") or "unknown"
    data = payload.get("data") if isinstance(payload.get("data"), dict) else {}
    _logger.info("Webhook received: event=%s msg_id=%s", event, msg_id)

    if event == "bot.status_change":
        status = data.get("status") if isinstance(data.get("status"), dict) else {}
        code = status.get("code")
        _logger.info("  bot_id=%s status=%s", data.get("bot_id"), code)
        if code == "done":
            _logger.info("  Meeting ended - transcript ready")
    elif event == "transcript.data":
        inner = data.get("data") if isinstance(data.get("data"), dict) else {}
        words = inner.get("words") if isinstance(inner.get("words"), list) else []
        text = " ".join(str(w.get("text", "")) for w in words if isinstance(w, dict))
        _logger.info("  transcript: %s - %s", _participant_name(data), text[:100])
    elif event == "participant_events.join":
        _logger.info("  participant joined: %s", _participant_name(data))
    elif event == "participant_events.leave":
        _logger.info("  participant left: %s", _participant_name(data))
    else:
        _logger.debug("  unhandled webhook event: %s", event)
    return event
