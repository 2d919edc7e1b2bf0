"""Versioned API router."""

from fastapi import APIRouter

from . import cash_register, grooming, health, plans, pricing, stays

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(pricing.router, tags=["pricing"])
router.include_router(plans.router, tags=["plans"])
router.include_router(grooming.router, prefix="/grooming", tags=["grooming"])
router.include_router(stays.router, tags=["stays"])
router.include_router(cash_register.router, tags=["cash-register"])

__all__ = ["router"]
