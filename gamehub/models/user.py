from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from gamehub.models.base import Base


ADMIN_ROLE = "SUPER_ADMIN"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="STUDENT")
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
