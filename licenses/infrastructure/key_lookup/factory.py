"""
Builds the configured KeyLookupOracle from Django settings.
"""
from django.conf import settings

from core.infrastructure.http import ProviderHttpClient
from licenses.infrastructure.key_lookup.lemonsqueezy import LemonSqueezyKeyLookup
from licenses.ports.key_lookup import KeyLookupOracle, NullKeyLookup


def build_key_lookup() -> KeyLookupOracle:
    """Online lookup when enabled, otherwise the permissive null adapter."""
    if not settings.LICENSE_KEY_VALIDATION_ENABLED:
        return NullKeyLookup()
    client = ProviderHttpClient(
        base_url=settings.LEMONSQUEEZY_API_URL,
        timeout=settings.PROVIDER_HTTP_TIMEOUT_SECONDS,
    )
    return LemonSqueezyKeyLookup(client)
