"""
Measurement service.

Data access for assessment visits. Paired-trial best values are derived here
on every write, so a stored record always satisfies the best-value rule no
matter what the client sent.
"""

import logging
from uuid import UUID
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import func

from carefit.db.errors import RecordNotFound, store_error_from_exception
from carefit.db.mapping import MEASUREMENT_FIELDS
from carefit.domain.metrics import DEFAULT_LATEST_LIMIT, PAIRED_METRICS, SCORE_METRICS
from carefit.models.measurement import Measurement
from carefit.services.derived_values import (
    build_paired_trial,
    coerce_int,
    coerce_number,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("userId", "measurementDate")
NUMBER_FIELDS = ("height", "weight")


def normalize_measurement(record: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Normalize the fields present in a (possibly partial) measurement record.

    Numbers default to 0, scores are truncated and clamped to their range,
    paired trials get their best value recomputed and notes never become None.
    """
    normalized = dict(record)
    for field in NUMBER_FIELDS:
        if field in normalized:
            normalized[field] = coerce_number(normalized[field])
    for metric in SCORE_METRICS:
        if metric.key in normalized:
            normalized[metric.key] = coerce_int(
                normalized[metric.key], metric.min_value, metric.max_value
            )
    for metric in PAIRED_METRICS:
        if metric.key in normalized:
            normalized[metric.key] = build_paired_trial(
                normalized[metric.key], metric.lower_is_better
            )
    if "notes" in normalized:
        normalized["notes"] = normalized["notes"] or ""
    return normalized


class MeasurementService:
    """Service for managing assessment measurements."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Dict[str, Any]]:
        """All measurements, newest measurement date first."""
        query = self.db.query(Measurement).order_by(
            desc(Measurement.measurement_date), desc(Measurement.created_at)
        )
        return self._fetch(query)

    def list_by_user(self, user_id: UUID) -> List[Dict[str, Any]]:
        """A user's full history, newest measurement date first."""
        query = (
            self.db.query(Measurement)
            .filter(Measurement.user_id == user_id)
            .order_by(desc(Measurement.measurement_date), desc(Measurement.created_at))
        )
        return self._fetch(query)

    def list_latest_by_user(
        self, user_id: UUID, limit: int = DEFAULT_LATEST_LIMIT
    ) -> List[Dict[str, Any]]:
        """
        The ``limit`` most recent visits of a user.

        Selected newest-first, returned oldest-first for display.
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        query = (
            self.db.query(Measurement)
            .filter(Measurement.user_id == user_id)
            .order_by(desc(Measurement.measurement_date), desc(Measurement.created_at))
            .limit(limit)
        )
        return list(reversed(self._fetch(query)))

    def get_by_id(self, measurement_id: UUID) -> Optional[Dict[str, Any]]:
        """
        Get a measurement by ID.

        Returns:
            The measurement record, or None if no measurement has this ID
        """
        measurement = self._get_row(measurement_id)
        if measurement is None:
            return None
        return MEASUREMENT_FIELDS.to_domain(measurement)

    def create(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a measurement.

        Args:
            payload: userId and measurementDate plus any of height, weight,
                tug, walkingSpeed, fr, cs10, bi, notes

        Returns:
            The stored measurement record

        Raises:
            ValueError: If userId or measurementDate is missing
            StoreError: If the store rejects the insert (e.g. same user and
                date already recorded)
        """
        missing = [field for field in REQUIRED_FIELDS if not payload.get(field)]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        record = {
            "height": 0,
            "weight": 0,
            "tug": None,
            "walkingSpeed": None,
            "fr": None,
            "cs10": 0,
            "bi": 0,
            "notes": "",
        }
        record.update(payload)

        measurement = Measurement(
            **MEASUREMENT_FIELDS.to_row(normalize_measurement(record))
        )
        try:
            self.db.add(measurement)
            self.db.commit()
            self.db.refresh(measurement)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from_exception(e) from e

        logger.info(
            f"[CREATE_MEASUREMENT] Created measurement {measurement.id} "
            f"for user {measurement.user_id} on {measurement.measurement_date}"
        )
        return MEASUREMENT_FIELDS.to_domain(measurement)

    def update(
        self, measurement_id: UUID, partial: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Patch the fields present in ``partial``; other fields stay untouched.

        Raises:
            RecordNotFound: If no measurement has this ID
            StoreError: If the store rejects the update
        """
        measurement = self._get_row(measurement_id)
        if measurement is None:
            raise RecordNotFound("Measurement", measurement_id)

        row = MEASUREMENT_FIELDS.to_row(normalize_measurement(partial))
        for column, value in row.items():
            setattr(measurement, column, value)
        # Refresh the timestamp even when no value changed
        measurement.updated_at = func.now()

        try:
            self.db.commit()
            self.db.refresh(measurement)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from_exception(e) from e

        logger.info(
            f"[UPDATE_MEASUREMENT] Updated measurement {measurement_id}: "
            f"{sorted(partial)}"
        )
        return MEASUREMENT_FIELDS.to_domain(measurement)

    def delete(self, measurement_id: UUID) -> None:
        """
        Delete a measurement.

        Raises:
            RecordNotFound: If no measurement has this ID
            StoreError: If the store rejects the delete
        """
        measurement = self._get_row(measurement_id)
        if measurement is None:
            raise RecordNotFound("Measurement", measurement_id)

        try:
            self.db.delete(measurement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise store_error_from_exception(e) from e

        logger.info(f"[DELETE_MEASUREMENT] Deleted measurement {measurement_id}")

    def _get_row(self, measurement_id: UUID) -> Optional[Measurement]:
        try:
            return (
                self.db.query(Measurement)
                .filter(Measurement.id == measurement_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise store_error_from_exception(e) from e

    def _fetch(self, query) -> List[Dict[str, Any]]:
        try:
            rows = query.all()
        except SQLAlchemyError as e:
            raise store_error_from_exception(e) from e
        return [MEASUREMENT_FIELDS.to_domain(row) for row in rows]
