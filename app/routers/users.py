from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import MessageResponse, UserResponse, UserUpdate

router = APIRouter()


@router.get("/profile", response_model=UserResponse, summary="Get profile")
async def get_profile(user: User = Depends(get_current_user)) -> User:
    return user


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update profile",
    responses={409: {"description": "Email already in use"}},
)
async def update_profile(
    data: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> User:
    repo = UserRepository(db)
    if data.email is not None:
        existing = repo.get_by_email(str(data.email))
        if existing is not None and existing.id != user.id:
            raise HTTPException(status_code=409, detail="Email already in use")
    updated = repo.update(user.id, data)  # type: ignore[arg-type]
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    return updated


@router.delete("/profile", response_model=MessageResponse, summary="Delete account")
async def delete_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    """Delete the account together with all its subscriptions and payments."""
    if not UserRepository(db).delete_with_data(user.id):  # type: ignore[arg-type]
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="User deleted successfully")
