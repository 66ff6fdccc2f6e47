"""
Licenses module - License key redemption.

This module handles:
- License key normalization
- Redemption Engine (one key, one seat)
- Global redemption registry (cross-account single use)
- Optional online key lookup against the payment provider
"""
