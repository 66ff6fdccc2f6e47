"""
Billing module - Payment provider webhooks.

This module handles:
- Provider event extraction and classification
- Event Reconciler (lock, unlock, revoke, restore, order seats)
- Seat quantity lookups against the provider API
"""
