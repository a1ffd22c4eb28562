from sqlalchemy import Column, Date, DateTime, Index, String
from sqlalchemy.sql import func
import uuid
from carefit.db.database import Base
from carefit.db.types import GUID, JSONDocument


class User(Base):
    __tablename__ = "users"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    last_name = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    gender = Column(String, nullable=False)
    birth_date = Column(Date, nullable=False)
    medical_history = Column(JSONDocument(), nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (Index("ix_users_name", "last_name", "first_name"),)
