import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from prbridge.errors import WebhookRejected
from prbridge.github.events import handle_event
from prbridge.logger import get_logger
from prbridge.security.webhook_verify import verify_signature
from prbridge.settings import Settings


logger = get_logger("prbridge.webhooks")

MISSING_FIELDS = "Missing required headers or body"
INVALID_SIGNATURE = "Invalid signature"
INVALID_JSON = "Invalid JSON payload"


@dataclass(frozen=True)
class WebhookDelivery:
    """
    One inbound GitHub delivery. ``raw_body`` is kept byte-for-byte as
    received because the signature covers exactly those bytes.
    """

    event: Optional[str]
    delivery_id: Optional[str]
    signature: Optional[str]
    raw_body: bytes

    @classmethod
    def from_headers(cls, headers: Mapping[str, str], raw_body: bytes) -> "WebhookDelivery":
        return cls(
            event=headers.get("x-github-event"),
            delivery_id=headers.get("x-github-delivery"),
            signature=headers.get("x-hub-signature-256"),
            raw_body=raw_body,
        )


def handle_delivery(delivery: WebhookDelivery, settings: Settings) -> Dict[str, Any]:
    """
    Validate, verify, parse and dispatch a webhook delivery.

    Order matters: presence check, then signature over the raw bytes,
    then JSON parsing. Raises WebhookRejected for every failure.
    """
    # Delivery id is only used for correlation and is not required
    if not delivery.event or not delivery.signature or not delivery.raw_body:
        logger.warning(
            "Rejected delivery %s: missing headers or body", delivery.delivery_id
        )
        raise WebhookRejected(400, MISSING_FIELDS)

    if not verify_signature(
        delivery.raw_body, delivery.signature, settings.github_webhook_secret
    ):
        logger.warning(
            "Webhook signature verification failed (delivery: %s)",
            delivery.delivery_id,
        )
        raise WebhookRejected(401, INVALID_SIGNATURE)

    try:
        # Bodies are UTF-8 text; json.loads would otherwise sniff UTF-16/32
        payload = json.loads(delivery.raw_body.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        # UnicodeDecodeError is a ValueError too
        logger.warning("Failed to parse webhook payload: %s", exc)
        raise WebhookRejected(400, INVALID_JSON) from exc

    logger.info(
        "Received GitHub webhook: %s (delivery: %s)",
        delivery.event,
        delivery.delivery_id,
    )

    handle_event(delivery.event, payload)

    return {"ok": True, "event": delivery.event, "deliveryId": delivery.delivery_id}
