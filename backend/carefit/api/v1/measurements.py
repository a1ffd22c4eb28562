"""
Measurement endpoints.

CRUD for assessment visits. Paired-trial best values are recomputed on every
write; a PUT with only {"bi": ...} patches the Barthel Index alone.
"""

from uuid import UUID
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from carefit.db.database import get_db
from carefit.schemas.measurement import (
    MeasurementCreateRequest,
    MeasurementResponse,
    MeasurementUpdateRequest,
)
from carefit.services.measurement_service import MeasurementService

router = APIRouter()


def _require_measurement(service: MeasurementService, measurement_id: UUID) -> dict:
    measurement = service.get_by_id(measurement_id)
    if measurement is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Measurement not found",
        )
    return measurement


@router.get("/measurements", response_model=List[MeasurementResponse])
def list_measurements(db: Session = Depends(get_db)):
    """All measurements, newest visit first."""
    return MeasurementService(db).list()


@router.post(
    "/measurements",
    response_model=MeasurementResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_measurement(
    request: MeasurementCreateRequest,
    db: Session = Depends(get_db),
):
    """
    Record a visit.

    userId and measurementDate are required. Numeric fields that are missing
    or not numeric are stored as 0. Returns 409 if the user already has a
    measurement on that date.
    """
    try:
        return MeasurementService(db).create(request.to_record())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/measurements/{measurement_id}", response_model=MeasurementResponse)
def get_measurement(measurement_id: UUID, db: Session = Depends(get_db)):
    """Get a measurement, 404 if absent."""
    return _require_measurement(MeasurementService(db), measurement_id)


@router.put("/measurements/{measurement_id}", response_model=MeasurementResponse)
def update_measurement(
    measurement_id: UUID,
    request: MeasurementUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    Replace the measurement fields present in the body.

    A failed write is reported as an error; the stored record is never
    echoed back as if the update had succeeded.
    """
    service = MeasurementService(db)
    _require_measurement(service, measurement_id)

    try:
        return service.update(measurement_id, request.to_record())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.delete(
    "/measurements/{measurement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_measurement(measurement_id: UUID, db: Session = Depends(get_db)):
    """Delete a measurement."""
    service = MeasurementService(db)
    _require_measurement(service, measurement_id)
    service.delete(measurement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
