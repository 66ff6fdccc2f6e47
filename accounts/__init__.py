"""
Accounts module - Seats and account lock state.

This module handles:
- Account and Seat entities
- Lock Policy
- Seat Allocator (assign, release, remove)
- Account persistence and status queries
"""
