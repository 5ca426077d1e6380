"""Versioned API router."""

from fastapi import APIRouter

from . import bookings, experiences, health, promo

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(experiences.router, prefix="/experiences", tags=["experiences"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(promo.router, prefix="/promo", tags=["promo"])
