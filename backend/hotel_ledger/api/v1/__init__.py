"""Versioned API router."""

from fastapi import APIRouter

from . import (
    auth,
    customers,
    health,
    payments,
    reservations,
    rooms,
    service_items,
    users,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
router.include_router(customers.router, prefix="/customers", tags=["customers"])
router.include_router(
    service_items.router, prefix="/service-items", tags=["service-items"]
)
router.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
router.include_router(payments.router, tags=["payments"])
router.include_router(users.router, prefix="/users", tags=["users"])

__all__ = ["router"]
