"""Payment history API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.payment import Payment
from app.models.user import User
from app.repositories.payment_repository import PaymentRepository
from app.schemas.payment import PaymentResponse

router = APIRouter()


@router.get(
    "/",
    response_model=list[PaymentResponse],
    summary="List payments",
    responses={401: {"description": "Unauthorized – invalid or missing token"}},
)
async def list_payments(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    subscription_id: UUID | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[Payment]:
    """List the caller's payments, newest first."""
    return PaymentRepository(db).get_all(
        user.id,  # type: ignore[arg-type]
        skip=skip,
        limit=limit,
        subscription_id=subscription_id,
    )


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment",
    responses={
        401: {"description": "Unauthorized – invalid or missing token"},
        404: {"description": "Payment not found"},
    },
)
async def get_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Payment:
    payment = PaymentRepository(db).get_by_id(payment_id, user.id)  # type: ignore[arg-type]
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment
