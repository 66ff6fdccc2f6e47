"""
Shared kernel for the seat license apps.

Domain exceptions, the Email value object and domain events live in
``core.domain``; the event bus, webhook signatures and the provider HTTP
session in ``core.infrastructure``; request middleware, metrics and
tracing at the package top level.
"""
