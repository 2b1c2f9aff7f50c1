"""
Core business logic services.

Layer-pure services that depend only on:
- srecha/core/entities/*
- srecha/core/interfaces/*
- srecha/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from srecha.core.services.auth_service import AuthService
from srecha.core.services.delivery_service import DeliveryService
from srecha.core.services.invoice_lifecycle import InvoiceLifecycleService

__all__ = [
    "InvoiceLifecycleService",
    "AuthService",
    "DeliveryService",
]
