"""Status mapper: fixed input -> output tables, defensive defaults for unknown values."""

import pytest

from app.domain.status_mapper import (
    CapabilityStatus,
    OrderStatus,
    PaymentStatus,
    PaymentStatusMapping,
    RequirementsStatus,
    map_capability_status,
    map_payment_status,
    map_requirements_status,
    most_severe_requirements,
)


@pytest.mark.parametrize(
    "provider_status, expected",
    [
        ("paid", PaymentStatusMapping(OrderStatus.CONFIRMED, PaymentStatus.PAID)),
        ("failed", PaymentStatusMapping(OrderStatus.CANCELLED, PaymentStatus.FAILED)),
        ("canceled", PaymentStatusMapping(OrderStatus.CANCELLED, PaymentStatus.FAILED)),
        ("expired", PaymentStatusMapping(OrderStatus.CANCELLED, PaymentStatus.EXPIRED)),
        ("open", None),
        ("pending", None),
        ("authorized", None),
        (None, None),
        ("something_new", None),
    ],
)
def test_payment_status_table(provider_status, expected):
    assert map_payment_status(provider_status) == expected


@pytest.mark.parametrize(
    "provider_status, expected",
    [
        ("past_due", RequirementsStatus.PAST_DUE),
        ("currently_due", RequirementsStatus.CURRENTLY_DUE),
        ("eventually_due", RequirementsStatus.NONE),
        (None, RequirementsStatus.NONE),
        ("brand_new_status", RequirementsStatus.CURRENTLY_DUE),
        ("", RequirementsStatus.CURRENTLY_DUE),
    ],
)
def test_requirements_status_table(provider_status, expected):
    assert map_requirements_status(provider_status) == expected


@pytest.mark.parametrize(
    "provider_status, expected",
    [
        ("active", CapabilityStatus.ACTIVE),
        ("pending", CapabilityStatus.PENDING),
        ("restricted", CapabilityStatus.INACTIVE),
        ("unsupported", CapabilityStatus.INACTIVE),
        (None, CapabilityStatus.INACTIVE),
        ("brand_new_status", CapabilityStatus.PENDING),
    ],
)
def test_capability_status_table(provider_status, expected):
    assert map_capability_status(provider_status) == expected


def test_unknown_values_never_map_to_most_permissive():
    """An unrecognised provider status must never read as all clear."""
    for unknown in ("ACTIVE", "ok", "none", "verified"):
        assert map_requirements_status(unknown) != RequirementsStatus.NONE
        assert map_capability_status(unknown) != CapabilityStatus.ACTIVE


def test_requirements_severity_ordering():
    assert RequirementsStatus.NONE.severity < RequirementsStatus.CURRENTLY_DUE.severity
    assert RequirementsStatus.CURRENTLY_DUE.severity < RequirementsStatus.PAST_DUE.severity
    assert (
        most_severe_requirements(RequirementsStatus.CURRENTLY_DUE, RequirementsStatus.PAST_DUE)
        == RequirementsStatus.PAST_DUE
    )
    assert most_severe_requirements() == RequirementsStatus.NONE
