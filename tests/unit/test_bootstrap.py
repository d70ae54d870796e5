"""Composition root wiring: one pipeline per category with its own store table, queue and registry."""

import pytest

from app.bootstrap import build_container
from app.config.settings import AppSettings


@pytest.mark.asyncio
async def test_container_builds_isolated_pipelines():
    container = build_container(AppSettings(max_retries=2))
    try:
        stripe = container.pipelines["stripe"]
        mollie = container.pipelines["mollie"]

        assert stripe.queue.main_key == "payment_events:stripe:main"
        assert mollie.queue.dead_letter_key == "payment_events:mollie:dead-letter"
        assert stripe.registry is not mollie.registry
        assert "checkout.session.completed" in stripe.registry
        assert "v2.core.account[requirements].updated" in stripe.registry
        assert mollie.registry.list_registered_types() == ["payment.updated"]
        assert stripe.processor.max_retries == 2
        assert stripe.metrics is container.metrics
    finally:
        await container.aclose()
