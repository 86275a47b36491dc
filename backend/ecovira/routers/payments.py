from fastapi import APIRouter, Query

from ecovira.services.payment_router import choose_payment_provider

router = APIRouter()


@router.get("/payment-router")
async def payment_router(
    method: str | None = Query(None),
    currency: str | None = Query(None),
):
    """Which payment provider handles this checkout."""
    decision = choose_payment_provider(method or None, currency or None)
    return {"ok": True, "provider": decision.provider, "reason": decision.reason}
