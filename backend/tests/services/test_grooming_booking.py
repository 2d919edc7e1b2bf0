"""Tests for booking, pricing and lifecycle of grooming appointments."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest

from petcare.core.exceptions import ConflictError, NotFoundError, ValidationError
from petcare.db.session import get_sessionmaker
from petcare.models import (
    GroomingAppointmentStatus,
    GroomingServiceType,
    GroomingStyle,
    LogisticsChoice,
    PaymentStatus,
    PlanServiceType,
    WorkflowStage,
)
from petcare.services import entitlement_service, grooming_booking_service

pytestmark = pytest.mark.asyncio

START = datetime(2024, 3, 5, 13, 0, tzinfo=UTC)


async def _book(session, setup, **overrides):
    params = {
        "client_id": setup["client_id"],
        "pet_id": setup["pet_id"],
        "service_type": GroomingServiceType.BATH_GROOMING,
        "grooming_style": GroomingStyle.HYGIENIC,
        "start_at": START,
    }
    params.update(overrides)
    return await grooming_booking_service.book_grooming(session, **params)


async def test_bath_grooming_requires_style(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError):
            await _book(session, catalog_setup, grooming_style=None)


async def test_bath_only_rejects_style(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError):
            await _book(
                session,
                catalog_setup,
                service_type=GroomingServiceType.BATH,
                grooming_style=GroomingStyle.BABY,
            )


async def test_end_must_follow_start(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError):
            await _book(session, catalog_setup, end_at=START - timedelta(minutes=5))


async def test_pet_must_belong_to_client(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(NotFoundError):
            await _book(session, catalog_setup, pet_id=catalog_setup["client_id"])


async def test_booking_without_plan_is_priced(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(
            session,
            catalog_setup,
            addon_ids=[catalog_setup["hydration_id"]],
            logistics_choice=LogisticsChoice.COMPANY_COMPANY,
        )

    # fallback 70 (small) + hydration 25 + pickup and delivery 25
    assert appointment.price == Decimal("120.00")
    assert appointment.payment_status == PaymentStatus.PENDING
    assert appointment.is_plan_usage is False
    assert appointment.client_plan_id is None
    assert appointment.status == GroomingAppointmentStatus.SCHEDULED
    assert appointment.workflow_stage == WorkflowStage.WAITING
    assert appointment.charge_date == date(2024, 3, 5)
    assert appointment.end_at.replace(tzinfo=UTC) == START + timedelta(minutes=60)
    assert appointment.addon_ids == [str(catalog_setup["hydration_id"])]


async def test_retired_addon_is_rejected(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(NotFoundError):
            await _book(
                session, catalog_setup, addon_ids=[catalog_setup["retired_addon_id"]]
            )


async def test_plan_funded_booking_is_free_and_consumes_a_unit(
    make_client_plan, catalog_setup, db_url: str
) -> None:
    plan = await make_client_plan(
        service_type=PlanServiceType.GROOMING, total_units=4, used_units=1
    )
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(
            session, catalog_setup, addon_ids=[catalog_setup["hydration_id"]]
        )
        stored = await entitlement_service.get_plan(session, client_plan_id=plan.id)

    assert appointment.price == Decimal("0.00")
    assert appointment.payment_status == PaymentStatus.EXEMPT
    assert appointment.is_plan_usage is True
    assert appointment.client_plan_id == plan.id
    assert appointment.units_redeemed == 1
    assert stored.used_units == 2


async def test_daycare_plan_does_not_fund_grooming(
    make_client_plan, catalog_setup, db_url: str
) -> None:
    await make_client_plan(service_type=PlanServiceType.DAYCARE, total_units=5)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)

    assert appointment.is_plan_usage is False
    assert appointment.price == Decimal("70.00")


async def test_plan_can_be_skipped(make_client_plan, catalog_setup, db_url: str) -> None:
    plan = await make_client_plan(service_type=PlanServiceType.GROOMING, total_units=4)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup, use_plan=False)
        stored = await entitlement_service.get_plan(session, client_plan_id=plan.id)

    assert appointment.is_plan_usage is False
    assert stored.used_units == 0


async def test_cancelling_plan_booking_gives_unit_back(
    make_client_plan, catalog_setup, db_url: str
) -> None:
    plan = await make_client_plan(service_type=PlanServiceType.GROOMING, total_units=4)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)
        cancelled = await grooming_booking_service.cancel_appointment(
            session, appointment_id=appointment.id
        )
        stored = await entitlement_service.get_plan(session, client_plan_id=plan.id)

    assert cancelled.status == GroomingAppointmentStatus.CANCELLED
    assert cancelled.awaiting_payment is False
    assert stored.used_units == 0


async def test_completed_appointment_cannot_be_cancelled(
    catalog_setup, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)
        for status in (
            GroomingAppointmentStatus.IN_SERVICE,
            GroomingAppointmentStatus.READY,
            GroomingAppointmentStatus.COMPLETED,
        ):
            appointment = await grooming_booking_service.update_status(
                session, appointment_id=appointment.id, new_status=status
            )

        with pytest.raises(ConflictError):
            await grooming_booking_service.cancel_appointment(
                session, appointment_id=appointment.id
            )


async def test_status_only_moves_one_step_forward(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)

        with pytest.raises(ConflictError):
            await grooming_booking_service.update_status(
                session,
                appointment_id=appointment.id,
                new_status=GroomingAppointmentStatus.COMPLETED,
            )

        same = await grooming_booking_service.update_status(
            session,
            appointment_id=appointment.id,
            new_status=GroomingAppointmentStatus.SCHEDULED,
        )
        assert same.status == GroomingAppointmentStatus.SCHEDULED

        moved = await grooming_booking_service.update_status(
            session,
            appointment_id=appointment.id,
            new_status=GroomingAppointmentStatus.IN_SERVICE,
        )
        assert moved.status == GroomingAppointmentStatus.IN_SERVICE

        with pytest.raises(ConflictError):
            await grooming_booking_service.update_status(
                session,
                appointment_id=appointment.id,
                new_status=GroomingAppointmentStatus.SCHEDULED,
            )


async def test_status_cancel_routes_through_cancellation(
    make_client_plan, catalog_setup, db_url: str
) -> None:
    plan = await make_client_plan(service_type=PlanServiceType.GROOMING, total_units=4)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)
        cancelled = await grooming_booking_service.update_status(
            session,
            appointment_id=appointment.id,
            new_status=GroomingAppointmentStatus.CANCELLED,
        )
        stored = await entitlement_service.get_plan(session, client_plan_id=plan.id)

    assert cancelled.status == GroomingAppointmentStatus.CANCELLED
    assert stored.used_units == 0


async def test_done_stage_marks_ready_and_awaiting_payment(
    catalog_setup, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)
        appointment = await grooming_booking_service.set_workflow_stage(
            session, appointment_id=appointment.id, stage=WorkflowStage.DRYING
        )
        appointment = await grooming_booking_service.set_workflow_stage(
            session, appointment_id=appointment.id, stage=WorkflowStage.BATHING
        )
        assert appointment.status == GroomingAppointmentStatus.SCHEDULED

        appointment = await grooming_booking_service.set_workflow_stage(
            session, appointment_id=appointment.id, stage=WorkflowStage.DONE
        )
        assert appointment.status == GroomingAppointmentStatus.READY
        assert appointment.awaiting_payment is True

        with pytest.raises(ConflictError):
            await grooming_booking_service.set_workflow_stage(
                session, appointment_id=appointment.id, stage=WorkflowStage.GROOMING
            )


async def test_done_stage_on_plan_booking_is_not_awaiting_payment(
    make_client_plan, catalog_setup, db_url: str
) -> None:
    await make_client_plan(service_type=PlanServiceType.GROOMING, total_units=4)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)
        appointment = await grooming_booking_service.set_workflow_stage(
            session, appointment_id=appointment.id, stage=WorkflowStage.DONE
        )

    assert appointment.status == GroomingAppointmentStatus.READY
    assert appointment.awaiting_payment is False


async def test_charge_date_can_move_until_cancelled(catalog_setup, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup)
        moved = await grooming_booking_service.update_charge_date(
            session, appointment_id=appointment.id, charge_date=date(2024, 3, 8)
        )
        assert moved.charge_date == date(2024, 3, 8)

        await grooming_booking_service.cancel_appointment(
            session, appointment_id=appointment.id
        )
        with pytest.raises(ConflictError):
            await grooming_booking_service.update_charge_date(
                session, appointment_id=appointment.id, charge_date=date(2024, 3, 9)
            )


async def test_calendar_event_id_is_stored(catalog_setup, notifier, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(
            session,
            catalog_setup,
            addon_ids=[catalog_setup["nail_trim_id"]],
            notes="Nervous with dryers",
            notifier=notifier,
        )

    async with sessionmaker() as session:
        stored = await grooming_booking_service.get_appointment(
            session, appointment_id=appointment.id
        )

    assert stored.external_event_id == "evt-123"
    [payload] = notifier.created
    assert payload.pet_name == "Bolt"
    assert payload.client_name == "Ana Souza"
    assert payload.service == "Bath + Grooming"
    assert payload.grooming_type == "Hygienic trim"
    assert payload.additional_services == ["Nail trim"]
    assert payload.observations == "Nervous with dryers"


async def test_calendar_failure_keeps_booking(catalog_setup, notifier, db_url: str) -> None:
    notifier.fail = True
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup, notifier=notifier)

    async with sessionmaker() as session:
        stored = await grooming_booking_service.get_appointment(
            session, appointment_id=appointment.id
        )

    assert stored.external_event_id is None
    assert stored.status == GroomingAppointmentStatus.SCHEDULED


async def test_cancel_removes_calendar_event(catalog_setup, notifier, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup, notifier=notifier)
        await grooming_booking_service.cancel_appointment(
            session, appointment_id=appointment.id, notifier=notifier
        )

    assert notifier.deleted == ["evt-123"]


class BrokenNotifier:
    """Notifier whose transport fails with an arbitrary error."""

    async def create_event(self, payload):
        raise RuntimeError("socket closed")

    async def delete_event(self, external_id):
        raise RuntimeError("socket closed")


async def test_unexpected_notifier_error_keeps_booking(
    catalog_setup, db_url: str
) -> None:
    notifier = BrokenNotifier()
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        appointment = await _book(session, catalog_setup, notifier=notifier)
        appointment.external_event_id = "evt-stale"
        await session.commit()

        cancelled = await grooming_booking_service.cancel_appointment(
            session, appointment_id=appointment.id, notifier=notifier
        )

    async with sessionmaker() as session:
        stored = await grooming_booking_service.get_appointment(
            session, appointment_id=appointment.id
        )

    assert cancelled.status == GroomingAppointmentStatus.CANCELLED
    assert stored.status == GroomingAppointmentStatus.CANCELLED


async def test_plan_booking_lists_plan_addons_on_calendar(
    make_client_plan, catalog_setup, notifier, db_url: str
) -> None:
    await make_client_plan(service_type=PlanServiceType.GROOMING, total_units=4)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await _book(
            session,
            catalog_setup,
            addon_ids=[catalog_setup["hydration_id"]],
            notifier=notifier,
        )

    [payload] = notifier.created
    assert payload.price == Decimal("0.00")
    assert payload.additional_services == ["Hydration", "Nail trim (plan)"]
