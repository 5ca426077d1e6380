"""Promo code preview API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookit.api import deps
from bookit.schemas.common import Envelope
from bookit.schemas.promo import PromoQuoteRead, PromoValidateRequest
from bookit.services import promo_service

router = APIRouter()


@router.post(
    "/validate",
    response_model=Envelope[PromoQuoteRead],
    summary="Validate a promo code against an order amount",
)
async def validate_promo(
    payload: PromoValidateRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Envelope[PromoQuoteRead]:
    quote = await promo_service.validate_promo(
        session, code=payload.code, order_amount=payload.order_amount
    )
    return Envelope[PromoQuoteRead](
        message="Promo code is valid", data=PromoQuoteRead(**quote.to_dict())
    )
