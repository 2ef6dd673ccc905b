from uuid import UUID

from sqlalchemy.orm import Session

from app.models.payment import Payment
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, data: UserCreate) -> User:
        user = User(name=data.name, email=str(data.email))
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user_id: UUID, data: UserUpdate) -> User | None:
        user = self.get_by_id(user_id)
        if not user:
            return None
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in update_data:
            update_data["email"] = str(update_data["email"])
        for key, value in update_data.items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_with_data(self, user_id: UUID) -> bool:
        """Delete a user together with their subscriptions and payments."""
        user = self.get_by_id(user_id)
        if not user:
            return False
        self.db.query(Payment).filter(Payment.user_id == user_id).delete()
        self.db.query(Subscription).filter(Subscription.user_id == user_id).delete()
        self.db.delete(user)
        self.db.commit()
        return True
