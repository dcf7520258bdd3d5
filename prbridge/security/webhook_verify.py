import hmac
import hashlib
from typing import Optional

from prbridge.logger import get_logger


logger = get_logger("prbridge.security")

SIGNATURE_PREFIX = "sha256="


def compute_signature(payload: bytes, secret: str) -> str:
    mac = hmac.new(
        secret.encode(),
        msg=payload,
        digestmod=hashlib.sha256,
    )
    return SIGNATURE_PREFIX + mac.hexdigest()


def verify_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Verify a GitHub webhook signature (X-Hub-Signature-256).

    The digest is computed over the raw bytes exactly as received.
    Returns False on any validation failure, including an empty secret
    and any algorithm prefix other than ``sha256=``.
    """
    if not signature:
        return False

    if not secret:
        logger.warning("Webhook secret is empty; rejecting signature")
        return False

    signature = signature.strip()

    if not signature.startswith(SIGNATURE_PREFIX):
        algorithm = signature.split("=", 1)[0]
        logger.warning("Unsupported signature algorithm: %s", algorithm)
        return False

    expected = compute_signature(payload, secret)

    try:
        return hmac.compare_digest(expected, signature)
    except TypeError:
        # compare_digest refuses non-ASCII str input
        logger.warning("Malformed signature header")
        return False
