"""
User service.

Data access for registered users. Records go in and come out in the domain
(camelCase) shape; USER_FIELDS does the column translation.
"""

import logging
from uuid import UUID
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import func

from carefit.db.errors import RecordNotFound, store_error_from_exception
from carefit.db.mapping import USER_FIELDS
from carefit.models.user import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("lastName", "firstName", "gender", "birthDate")


class UserService:
    """Service for managing users."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Dict[str, Any]]:
        """All users ordered by last name, then first name."""
        try:
            users = (
                self.db.query(User)
                .order_by(User.last_name, User.first_name)
                .all()
            )
        except SQLAlchemyError as e:
            raise store_error_from_exception(e) from e
        return [USER_FIELDS.to_domain(user) for user in users]

    def get_by_id(self, user_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Get a user by ID.

        Returns:
            The user record, or None if no user has this ID
        """
        user = self._get_row(user_id)
        if user is None:
            return None
        return USER_FIELDS.to_domain(user)

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a user.

        Args:
            payload: lastName, firstName, gender, birthDate and optional
                medicalHistory

        Returns:
            The stored user record, with store-assigned id and timestamps

        Raises:
            ValueError: If a required field is missing
            StoreError: If the store rejects the insert
        """
        missing = [field for field in REQUIRED_FIELDS if not payload.get(field)]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        record = dict(payload)
        record["medicalHistory"] = list(record.get("medicalHistory") or [])

        user = User(**USER_FIELDS.to_row(record))
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from_exception(e) from e

        logger.info(f"[CREATE_USER] Created user {user.id}")
        return USER_FIELDS.to_domain(user)

    def update(self, user_id: UUID, partial: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Patch the fields present in ``partial``; other fields stay untouched.

        Raises:
            RecordNotFound: If no user has this ID
            StoreError: If the store rejects the update
        """
        user = self._get_row(user_id)
        if user is None:
            raise RecordNotFound("User", user_id)

        record = dict(partial)
        if "medicalHistory" in record:
            record["medicalHistory"] = list(record["medicalHistory"] or [])

        for column, value in USER_FIELDS.to_row(record).items():
            setattr(user, column, value)
        # Refresh the timestamp even when no value changed
        user.updated_at = func.now()

        try:
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from_exception(e) from e

        logger.info(f"[UPDATE_USER] Updated user {user_id}: {sorted(record)}")
        return USER_FIELDS.to_domain(user)

    def delete(self, user_id: UUID) -> None:
        """
        Delete a user. The user's measurements are left in place.

        Raises:
            RecordNotFound: If no user has this ID
            StoreError: If the store rejects the delete
        """
        user = self._get_row(user_id)
        if user is None:
            raise RecordNotFound("User", user_id)

        try:
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from_exception(e) from e

        logger.info(f"[DELETE_USER] Deleted user {user_id}")

    def _get_row(self, user_id: UUID) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            raise store_error_from_exception(e) from e
