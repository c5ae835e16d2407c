"""Tests for the intake lifecycle service."""

import asyncio
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from intake_tracker.domain.errors import (
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from intake_tracker.domain.intakes import IntakePeriod, IntakeRequest, IntakeUpdate
from intake_tracker.domain.nutrition import UnitKind
from intake_tracker.services.cache import intake_list_key
from tests.conftest import BrokenCache, ServiceSet, build_services

DAY = date(2024, 5, 1)
NEXT_DAY = date(2024, 5, 2)


def _create(services: ServiceSet, user_id, **kwargs):  # type: ignore[no-untyped-def]
    request = IntakeRequest(
        food_id=kwargs.pop("food_id", "oats"),
        date=kwargs.pop("date", DAY),
        amount=kwargs.pop("amount", 50),
        **kwargs,
    )
    return asyncio.run(services.intake_service.create(user_id, request))


def test_create_defaults_to_grams_and_computes_totals(services: ServiceSet) -> None:
    user_id = uuid4()

    record = _create(services, user_id, amount=50)

    assert record.unit == UnitKind.GRAMS
    assert record.period == IntakePeriod.SNACK
    assert record.food_name == "Rolled oats"
    assert record.profile.totals.calories == Decimal("185")
    assert record.profile.calories_per_100 == Decimal("370")
    assert services.intake_repository.records[record.id] == record
    assert services.cache.evicted == [intake_list_key(user_id, DAY)]


def test_create_with_pieces(services: ServiceSet) -> None:
    record = _create(services, uuid4(), food_id="egg", amount=2, unit=UnitKind.PIECES)

    assert record.profile.totals.calories == Decimal("144")
    assert record.profile.totals.protein == Decimal("12.6")


def test_create_rejects_unit_not_advertised(services: ServiceSet) -> None:
    with pytest.raises(ValidationError, match="does not support unit type PIECES"):
        _create(services, uuid4(), food_id="oats", unit=UnitKind.PIECES)

    assert services.intake_repository.records == {}


def test_create_maps_catalog_not_found(services: ServiceSet) -> None:
    with pytest.raises(NotFoundError, match="Food not found"):
        _create(services, uuid4(), food_id="unknown")


def test_create_maps_catalog_unavailable(services: ServiceSet) -> None:
    services.catalog_client.unavailable = True

    with pytest.raises(UpstreamUnavailableError):
        _create(services, uuid4())


def test_list_for_date_reads_through_cache(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id)

    first = services.intake_service.list_for_date(user_id, DAY)
    services.intake_repository.records.clear()
    second = services.intake_service.list_for_date(user_id, DAY)

    assert first == [record]
    assert second == [record]


def test_mutating_listed_intakes_keeps_cache(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id)

    services.intake_service.list_for_date(user_id, DAY).clear()
    services.intake_service.list_for_date(user_id, DAY).append(record)

    assert services.intake_service.list_for_date(user_id, DAY) == [record]


def test_list_without_date_returns_all_days(services: ServiceSet) -> None:
    user_id = uuid4()
    _create(services, user_id, date=DAY)
    _create(services, user_id, date=NEXT_DAY)
    _create(services, uuid4(), date=DAY)

    records = services.intake_service.list_for_date(user_id, None)

    assert {record.date for record in records} == {DAY, NEXT_DAY}


def test_create_evicts_stale_list(services: ServiceSet) -> None:
    user_id = uuid4()
    assert services.intake_service.list_for_date(user_id, DAY) == []

    record = _create(services, user_id)

    assert services.intake_service.list_for_date(user_id, DAY) == [record]


def test_update_amount_recomputes_totals(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id, amount=50)

    updated = services.intake_service.update(
        record.id, user_id, IntakeUpdate(amount=200)
    )

    assert updated.amount == 200
    assert updated.profile.totals.calories == Decimal("740")
    assert updated.profile.calories_per_100 == record.profile.calories_per_100


def test_update_unit_validates_against_stored_profile(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id)

    with pytest.raises(ValidationError):
        services.intake_service.update(
            record.id, user_id, IntakeUpdate(unit=UnitKind.PIECES)
        )

    assert services.intake_repository.records[record.id] == record


def test_update_unit_switches_calculation(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id, food_id="egg", amount=100)

    updated = services.intake_service.update(
        record.id, user_id, IntakeUpdate(unit=UnitKind.PIECES, amount=1)
    )

    assert updated.unit == UnitKind.PIECES
    assert updated.profile.totals.calories == Decimal("72")


def test_update_date_evicts_old_and_new_entries_only(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id)
    services.cache.evicted.clear()

    updated = services.intake_service.update(
        record.id, user_id, IntakeUpdate(date=NEXT_DAY)
    )

    assert updated.date == NEXT_DAY
    assert updated.profile == record.profile
    assert services.cache.evicted == [
        intake_list_key(user_id, DAY),
        intake_list_key(user_id, NEXT_DAY),
    ]


def test_update_of_foreign_intake_is_not_found(services: ServiceSet) -> None:
    record = _create(services, uuid4())

    with pytest.raises(NotFoundError):
        services.intake_service.update(record.id, uuid4(), IntakeUpdate(amount=10))


def test_delete_removes_and_evicts(services: ServiceSet) -> None:
    user_id = uuid4()
    record = _create(services, user_id)
    services.cache.evicted.clear()

    services.intake_service.delete(record.id, user_id)

    assert services.intake_repository.records == {}
    assert services.cache.evicted == [intake_list_key(user_id, DAY)]


def test_delete_missing_intake_is_a_no_op(services: ServiceSet) -> None:
    services.intake_service.delete(uuid4(), uuid4())

    assert services.cache.evicted == []


def test_cache_failures_do_not_fail_writes() -> None:
    services = build_services(cache=BrokenCache())
    user_id = uuid4()

    record = _create(services, user_id)
    listed = services.intake_service.list_for_date(user_id, DAY)
    services.intake_service.delete(record.id, user_id)

    assert listed == [record]
    assert services.intake_repository.records == {}
