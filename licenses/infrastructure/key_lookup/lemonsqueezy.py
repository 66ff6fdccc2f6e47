"""
Lemon Squeezy implementation of KeyLookupOracle.

Uses the public license API: ``POST /v1/licenses/validate``.
"""
import logging

from core.domain.exceptions import KeyLookupUnavailableError
from core.infrastructure.http import ProviderHttpClient, ProviderRequestError
from licenses.domain.license_key import mask_license_key
from licenses.ports.key_lookup import KeyLookupOracle

logger = logging.getLogger(__name__)


class LemonSqueezyKeyLookup(KeyLookupOracle):
    """
    Asks Lemon Squeezy whether a license key exists.

    A 200 response carrying a ``license_key`` object means found, a 404
    means not found. Anything else is indeterminate.
    """

    def __init__(self, client: ProviderHttpClient):
        self.client = client

    async def find_key(self, license_key: str) -> bool:
        try:
            response = await self.client.arequest(
                "POST",
                "/v1/licenses/validate",
                operation="license_validate",
                data={"license_key": license_key},
                headers={"Accept": "application/json"},
            )
        except ProviderRequestError as exc:
            raise KeyLookupUnavailableError() from exc

        if response.status_code == 404:
            logger.info(
                "License key unknown to provider",
                extra={"license_key": mask_license_key(license_key)},
            )
            return False

        if response.status_code == 200:
            body = ProviderHttpClient.json(response)
            return isinstance(body.get("license_key"), dict)

        logger.warning(
            "Unexpected license validation response",
            extra={
                "status_code": response.status_code,
                "license_key": mask_license_key(license_key),
            },
        )
        raise KeyLookupUnavailableError()
