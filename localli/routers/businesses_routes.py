# localli/routers/businesses_routes.py

from typing import List

from fastapi import APIRouter, Depends

from localli.auth import get_current_user
from localli.core import Actor, AvailabilityResolver, BusinessDirectory, ForbiddenError, ROLE_OWNER
from localli.core.authz import owns_business
from localli.deps import get_availability, get_directory, require_role
from localli.schemas import BusinessCreate, BusinessHours, BusinessPublic, SlotPublic

router = APIRouter(
    prefix="/businesses",
    tags=["businesses"],
)


@router.post("", response_model=BusinessPublic, status_code=201)
def create_business(
    business: BusinessCreate,
    businesses: BusinessDirectory = Depends(get_directory),
    current_user: Actor = Depends(get_current_user),
):
    require_role(current_user, ROLE_OWNER)  # only owners can list a business
    return businesses.create(
        name=business.name,
        owner_id=current_user.id,
        open_time=business.open_time,
        close_time=business.close_time,
        slot_minutes=business.slot_minutes,
    )


@router.put("/{business_id}/hours", response_model=BusinessPublic)
def set_business_hours(
    business_id: int,
    hours: BusinessHours,
    businesses: BusinessDirectory = Depends(get_directory),
    current_user: Actor = Depends(get_current_user),
):
    # 1) Only the owning owner may change hours
    business = businesses.get(business_id)
    if not owns_business(business, current_user):
        raise ForbiddenError("Not authorized to change this business")

    # 2) Existing appointments keep their labels even if they no longer fit
    return businesses.set_hours(business.id, hours.open_time, hours.close_time, hours.slot_minutes)


@router.get("/{business_id}/slots", response_model=List[SlotPublic])
def business_slots(
    business_id: int,
    date: str,
    availability: AvailabilityResolver = Depends(get_availability),
    current_user: Actor = Depends(get_current_user),
):
    return [
        {"time": slot.label, "available": slot.available}
        for slot in availability.get_availability(business_id, date)
    ]
