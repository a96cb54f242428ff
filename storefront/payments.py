"""
Payments — mocked gateway.

Checkout confirms payment synchronously: the gateway is asked to charge the
computed total inside the order transaction and the order is stored as paid.
``MockPaymentGateway`` approves everything and counts calls for tests.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from kungfu import Result, Ok, Error

from storefront.errors import ValidationError

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\+?\d{9,15}$")


class PaymentMethod(StrEnum):
    MPESA = "mpesa"
    CARD = "card"


class PaymentStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"


@dataclass(frozen=True, slots=True)
class PaymentReceipt:
    reference: str
    method: PaymentMethod
    amount: int
    approved: bool


class PaymentGateway(Protocol):
    async def charge(
        self,
        method: PaymentMethod,
        amount: int,
        phone_number: str | None = None,
    ) -> PaymentReceipt: ...


class MockPaymentGateway:
    def __init__(self, approve: bool = True) -> None:
        self.approve = approve
        self.call_count = 0

    async def charge(
        self,
        method: PaymentMethod,
        amount: int,
        phone_number: str | None = None,
    ) -> PaymentReceipt:
        self.call_count += 1
        reference = f"{method.value}_{uuid.uuid4().hex[:12]}"
        logger.debug("Mock charge %s via %s: %s", amount, method.value, reference)
        return PaymentReceipt(
            reference=reference,
            method=method,
            amount=amount,
            approved=self.approve,
        )


def check_phone_number(phone: str | None) -> Result[str | None, ValidationError]:
    """M-Pesa numbers are optional; when given they must look like a phone number."""
    if phone is None:
        return Ok(None)
    cleaned = phone.replace(" ", "")
    if not PHONE_PATTERN.match(cleaned):
        return Error(ValidationError("Invalid phone number"))
    return Ok(cleaned)


__all__ = (
    "PHONE_PATTERN",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentReceipt",
    "PaymentGateway",
    "MockPaymentGateway",
    "check_phone_number",
)
