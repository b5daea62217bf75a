"""Role binding model"""

from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint

from .base import Base, Role, literal_enum, utcnow


class UserRole(Base):
    """Binds an external identity to a role"""

    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(100), nullable=False, index=True)
    role = Column(literal_enum(Role, "app_role"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="unique_user_role"),
    )

    def __repr__(self):
        return f"<UserRole(user='{self.user_id}', role='{self.role.value}')>"
