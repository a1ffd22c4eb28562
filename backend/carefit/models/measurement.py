from sqlalchemy import Column, Date, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.sql import func
import uuid
from carefit.db.database import Base
from carefit.db.types import GUID, JSONDocument


class Measurement(Base):
    __tablename__ = "measurements"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    # No foreign key: deleting a user leaves its measurements in place
    user_id = Column(GUID(), nullable=False, index=True)
    measurement_date = Column(Date, nullable=False, index=True)

    height = Column(Float, nullable=False, default=0)
    weight = Column(Float, nullable=False, default=0)

    # Paired trials stored as {"first", "second", "best"}
    tug = Column(JSONDocument(), nullable=False)
    walking_speed = Column(JSONDocument(), nullable=False)
    fr = Column(JSONDocument(), nullable=False)

    cs10 = Column(Integer, nullable=False, default=0)
    bi = Column(Integer, nullable=False, default=0)
    notes = Column(String, nullable=False, default="")

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id", "measurement_date", name="uq_measurements_user_date"
        ),
    )
