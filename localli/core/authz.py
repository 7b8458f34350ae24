# localli/core/authz.py

import logging
from dataclasses import dataclass

from .errors import ForbiddenError

logger = logging.getLogger(__name__)

ROLE_CUSTOMER = "customer"
ROLE_OWNER = "owner"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller, supplied per request by the identity layer."""
    id: int
    role: str

    @property
    def is_owner(self) -> bool:
        return self.role == ROLE_OWNER

    @property
    def is_customer(self) -> bool:
        return self.role == ROLE_CUSTOMER


def owns_business(business, actor: Actor) -> bool:
    return business is not None and actor.is_owner and business.owner_id == actor.id


def can_modify(appointment, business, actor: Actor, owner_only: bool = False) -> bool:
    """
    True if ``actor`` may change ``appointment``.

    The owner of the appointment's business always may. The customer who
    booked it may too, unless ``owner_only`` is set (confirmation).
    """
    if actor is None:
        return False
    if owns_business(business, actor):
        return True
    if owner_only:
        return False
    return appointment.customer_id == actor.id


def require_can_modify(appointment, business, actor: Actor, owner_only: bool = False) -> None:
    if not can_modify(appointment, business, actor, owner_only=owner_only):
        logger.warning(
            "Actor %s (%s) denied on appointment %s",
            getattr(actor, "id", None), getattr(actor, "role", None), appointment.id,
        )
        raise ForbiddenError("Not authorized to modify this appointment")
