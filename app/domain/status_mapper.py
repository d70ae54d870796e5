"""
Provider status vocabulary -> internal state values. Pure functions, no I/O.

Unrecognised provider values never map to the most permissive internal value: a new
provider status must not read as "all clear".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class RequirementsStatus(str, Enum):
    """Compliance requirements severity, ordered from least to most severe."""

    NONE = "none"
    CURRENTLY_DUE = "currently_due"
    PAST_DUE = "past_due"

    @property
    def severity(self) -> int:
        return _REQUIREMENTS_SEVERITY[self]


_REQUIREMENTS_SEVERITY: Dict[RequirementsStatus, int] = {
    RequirementsStatus.NONE: 0,
    RequirementsStatus.CURRENTLY_DUE: 1,
    RequirementsStatus.PAST_DUE: 2,
}


class CapabilityStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


class OrderStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PAID = "paid"
    FAILED = "failed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class PaymentStatusMapping:
    """Internal (order, payment) status pair for a terminal provider payment state."""

    order_status: OrderStatus
    payment_status: PaymentStatus


_REQUIREMENTS_MAP: Dict[str, RequirementsStatus] = {
    "past_due": RequirementsStatus.PAST_DUE,
    "currently_due": RequirementsStatus.CURRENTLY_DUE,
    "eventually_due": RequirementsStatus.NONE,
}

REQUIREMENTS_DEFAULT = RequirementsStatus.CURRENTLY_DUE

_CAPABILITY_MAP: Dict[str, CapabilityStatus] = {
    "active": CapabilityStatus.ACTIVE,
    "pending": CapabilityStatus.PENDING,
    "restricted": CapabilityStatus.INACTIVE,
    "unsupported": CapabilityStatus.INACTIVE,
}

CAPABILITY_DEFAULT = CapabilityStatus.PENDING

_TERMINAL_PAYMENT_MAP: Dict[str, PaymentStatusMapping] = {
    "paid": PaymentStatusMapping(OrderStatus.CONFIRMED, PaymentStatus.PAID),
    "failed": PaymentStatusMapping(OrderStatus.CANCELLED, PaymentStatus.FAILED),
    "canceled": PaymentStatusMapping(OrderStatus.CANCELLED, PaymentStatus.FAILED),
    "expired": PaymentStatusMapping(OrderStatus.CANCELLED, PaymentStatus.EXPIRED),
}

NON_TERMINAL_PAYMENT_STATES = frozenset({"open", "pending", "authorized"})


def map_requirements_status(provider_status: Optional[str]) -> RequirementsStatus:
    """None (no requirements) -> NONE; unknown -> CURRENTLY_DUE."""
    if provider_status is None:
        return RequirementsStatus.NONE
    return _REQUIREMENTS_MAP.get(provider_status, REQUIREMENTS_DEFAULT)


def map_capability_status(provider_status: Optional[str]) -> CapabilityStatus:
    """Absent capability -> INACTIVE; unknown -> PENDING, never ACTIVE."""
    if provider_status is None:
        return CapabilityStatus.INACTIVE
    return _CAPABILITY_MAP.get(provider_status, CAPABILITY_DEFAULT)


def map_payment_status(provider_status: Optional[str]) -> Optional[PaymentStatusMapping]:
    """
    Terminal provider payment states map to an (order, payment) pair. Non-terminal and
    unrecognised states return None: the caller takes no action.
    """
    if provider_status is None:
        return None
    return _TERMINAL_PAYMENT_MAP.get(provider_status)


def most_severe_requirements(*statuses: RequirementsStatus) -> RequirementsStatus:
    """Combine several requirement readings into the most severe one."""
    if not statuses:
        return RequirementsStatus.NONE
    return max(statuses, key=lambda s: s.severity)
