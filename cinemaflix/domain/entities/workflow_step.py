from __future__ import annotations

from enum import Enum


class WorkflowStep(str, Enum):
    SELECTING_SEATS = "selecting_seats"
    PAYING = "paying"
    CONFIRMED = "confirmed"


class PaymentMethod(str, Enum):
    CARD = "card"
    WALLET = "wallet"
    UPI = "upi"
    NETBANKING = "netbanking"
