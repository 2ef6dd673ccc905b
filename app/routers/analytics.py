from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.analytics_repository import AnalyticsRepository
from app.schemas.analytics import AnalyticsResponse, CategoryTotal, StatusCount

router = APIRouter()


@router.get(
    "/",
    response_model=AnalyticsResponse,
    summary="Get spending analytics",
    responses={401: {"description": "Unauthorized – invalid or missing token"}},
)
async def get_analytics(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> AnalyticsResponse:
    """Monthly spend, per-category totals and subscription counts by status."""
    repo = AnalyticsRepository(db)
    user_id = user.id
    return AnalyticsResponse(
        total_monthly_spend=repo.total_monthly_spend(user_id),  # type: ignore[arg-type]
        category_breakdown=[
            CategoryTotal(category=c.category, total=c.total, count=c.count)
            for c in repo.category_breakdown(user_id)  # type: ignore[arg-type]
        ],
        status_counts=[
            StatusCount(status=s.status, count=s.count)
            for s in repo.status_counts(user_id)  # type: ignore[arg-type]
        ],
    )
