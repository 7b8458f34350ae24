# localli/routers/appointments_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends

from localli.auth import get_current_user
from localli.core import Actor, ReservationService
from localli.deps import get_reservations
from localli.schemas import AppointmentCreate, AppointmentPublic, AppointmentReschedule

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.post("", response_model=AppointmentPublic, status_code=201)
def book_appointment(
    appt: AppointmentCreate,
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    # 409 on a taken slot: the client re-fetches availability and resubmits
    return reservations.book(current_user, appt.business_id, appt.date, appt.slot)


@router.get("/my", response_model=List[AppointmentPublic])
def list_my_appointments(
    status: Optional[str] = "active",
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    return reservations.list_mine(current_user, status=status)


@router.get("/business/{business_id}", response_model=List[AppointmentPublic])
def list_business_appointments(
    business_id: int,
    status: Optional[str] = "active",
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    return reservations.list_for_business(current_user, business_id, status=status)


@router.get("/owner/all", response_model=List[AppointmentPublic])
def list_owner_appointments(
    status: Optional[str] = "active",
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    return reservations.list_for_owner(current_user, status=status)


@router.put("/{appt_id}", response_model=AppointmentPublic)
def reschedule_appointment(
    appt_id: int,
    change: AppointmentReschedule,
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    return reservations.reschedule(current_user, appt_id, change.new_date, change.new_slot)


@router.delete("/{appt_id}", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    # cancelling an already-cancelled appointment returns it unchanged
    return reservations.cancel(current_user, appt_id)


@router.post("/{appt_id}/confirm", response_model=AppointmentPublic)
def confirm_appointment(
    appt_id: int,
    reservations: ReservationService = Depends(get_reservations),
    current_user: Actor = Depends(get_current_user),
):
    return reservations.confirm(current_user, appt_id)
