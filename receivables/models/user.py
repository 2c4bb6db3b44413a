from sqlalchemy import Column, DateTime, String

from receivables.core.database import Base
from receivables.models.shared import UUIDType, generate_uuid, utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    username = Column(String(150), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now)
