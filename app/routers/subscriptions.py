from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.core.events import get_publisher
from app.models.subscription import Subscription, SubscriptionStatus
from app.models.user import User
from app.repositories.subscription_repository import SubscriptionRepository
from app.schemas.subscription import SubscriptionCreate, SubscriptionResponse, SubscriptionUpdate
from app.schemas.user import MessageResponse
from app.services.event_publisher import (
    SUBSCRIPTION_ADDED,
    SUBSCRIPTION_DELETED,
    SUBSCRIPTION_UPDATED,
    EventPublisher,
    subscription_payload,
)

router = APIRouter()


@router.get(
    "/",
    response_model=list[SubscriptionResponse],
    summary="List subscriptions",
    responses={401: {"description": "Unauthorized – invalid or missing token"}},
)
async def list_subscriptions(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    status: SubscriptionStatus | None = None,
    category: str | None = None,
    order_by: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[Subscription]:
    """List the caller's subscriptions. Optionally filter by status or category."""
    repo = SubscriptionRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(user.id))  # type: ignore[arg-type]
    return repo.get_all(
        user.id,  # type: ignore[arg-type]
        skip=skip,
        limit=limit,
        status=status,
        category=category,
        order_by=order_by,
    )


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Get subscription",
    responses={
        401: {"description": "Unauthorized – invalid or missing token"},
        404: {"description": "Subscription not found"},
    },
)
async def get_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Subscription:
    """Get a subscription by ID."""
    subscription = SubscriptionRepository(db).get_by_id(subscription_id, user.id)  # type: ignore[arg-type]
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post(
    "/",
    response_model=SubscriptionResponse,
    status_code=201,
    summary="Create subscription",
    responses={
        401: {"description": "Unauthorized – invalid or missing token"},
        422: {"description": "Validation error"},
    },
)
async def create_subscription(
    data: SubscriptionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    publisher: EventPublisher = Depends(get_publisher),
) -> Subscription:
    """Create a new subscription."""
    subscription = SubscriptionRepository(db).create(data, user.id)  # type: ignore[arg-type]
    await publisher.publish(SUBSCRIPTION_ADDED, subscription_payload(subscription))
    return subscription


@router.put(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Update subscription",
    responses={
        401: {"description": "Unauthorized – invalid or missing token"},
        404: {"description": "Subscription not found"},
        422: {"description": "Validation error"},
    },
)
async def update_subscription(
    subscription_id: UUID,
    data: SubscriptionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    publisher: EventPublisher = Depends(get_publisher),
) -> Subscription:
    """Edit, pause, resume or cancel a subscription."""
    subscription = SubscriptionRepository(db).update(subscription_id, data, user.id)  # type: ignore[arg-type]
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    await publisher.publish(SUBSCRIPTION_UPDATED, subscription_payload(subscription))
    return subscription


@router.delete(
    "/{subscription_id}",
    response_model=MessageResponse,
    summary="Delete subscription",
    responses={
        401: {"description": "Unauthorized – invalid or missing token"},
        404: {"description": "Subscription not found"},
    },
)
async def delete_subscription(
    subscription_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    publisher: EventPublisher = Depends(get_publisher),
) -> MessageResponse:
    """Delete a subscription. Its payment history is kept."""
    if not SubscriptionRepository(db).delete(subscription_id, user.id):  # type: ignore[arg-type]
        raise HTTPException(status_code=404, detail="Subscription not found")
    await publisher.publish(SUBSCRIPTION_DELETED, str(subscription_id))
    return MessageResponse(message="Subscription removed")
