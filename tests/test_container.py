"""Tests for container wiring."""

import asyncio

from intake_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.intake_service is not None
    assert container.user_cleanup_service.batch_size == 1000
    asyncio.run(container.close_resources())
