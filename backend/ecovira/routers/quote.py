"""Quote router — price a booking and expose the extras table."""

from fastapi import APIRouter, Depends

from ecovira.data.extras_pricing import ExtrasPricing
from ecovira.dependencies import get_extras_pricing, get_quote_builder
from ecovira.schemas.quote import QuoteRequest
from ecovira.services.quote_builder import QuoteBuilder

router = APIRouter()


@router.post("/quote")
async def build_quote(
    req: QuoteRequest,
    builder: QuoteBuilder = Depends(get_quote_builder),
):
    """Base fare + markup + extras + fees, in a single currency."""
    quote = builder.build_quote(req)
    return {"ok": True, "quote": quote.to_dict()}


@router.get("/extras/pricing")
async def extras_pricing(pricing: ExtrasPricing = Depends(get_extras_pricing)):
    return {"ok": True, "pricing": pricing.to_dict()}
