"""
Inbound webhook signature verification.

The payment provider signs the exact request body with HMAC-SHA256 and
sends the hex digest in the ``X-Signature`` header.
"""
import hashlib
import hmac
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)


class WebhookSignatureVerifier:
    """Verifies provider webhook signatures over raw request bytes."""

    @staticmethod
    def generate_signature(raw_body: bytes, secret: str) -> str:
        """
        Generate HMAC signature for a raw webhook body.

        Args:
            raw_body: Request body exactly as received
            secret: Shared signing secret

        Returns:
            HMAC SHA-256 signature (hex)
        """
        return hmac.new(secret.encode(), raw_body, hashlib.sha256).hexdigest()

    @staticmethod
    def verify(
        raw_body: Optional[bytes],
        signature: Optional[Union[str, bytes]],
        secret: Optional[str],
    ) -> bool:
        """
        Verify a webhook signature.

        Fails closed: an empty secret, signature or body is rejected
        before any digest is computed. The body must be the raw bytes,
        never a re-serialized payload.

        Args:
            raw_body: Request body exactly as received
            signature: Value of the signature header
            secret: Shared signing secret

        Returns:
            True if the signature matches
        """
        if not secret or not signature or not raw_body:
            return False

        expected = WebhookSignatureVerifier.generate_signature(raw_body, secret).encode()
        if isinstance(signature, str):
            try:
                provided = signature.strip().encode("ascii")
            except UnicodeEncodeError:
                return False
        else:
            provided = signature.strip()

        if len(provided) != len(expected):
            logger.debug("Webhook signature length mismatch")
            return False
        return hmac.compare_digest(expected, provided)
