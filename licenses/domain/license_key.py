"""
License key normalization.

Keys are compared after trimming surrounding whitespace and case-folding,
so ``" abc-DEF "`` and ``"ABC-def"`` are the same key everywhere: in the
account-local registry, the global registry and a seat's ``source_key``.
"""

from typing import Optional

from core.domain.exceptions import LicenseKeyMissingError


def normalize_license_key(raw: Optional[str]) -> str:
    """
    Normalize a license key.

    Args:
        raw: Key as received

    Returns:
        Normalized key

    Raises:
        LicenseKeyMissingError: If the key is empty after normalization
    """
    key = str(raw or "").strip().casefold()
    if not key:
        raise LicenseKeyMissingError()
    return key


def mask_license_key(key: str) -> str:
    """Keep the last four characters, for logs."""
    if len(key) <= 4:
        return "*" * len(key)
    return "*" * (len(key) - 4) + key[-4:]
