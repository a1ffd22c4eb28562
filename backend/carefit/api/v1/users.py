"""
User endpoints.

CRUD for registered users plus the nested per-user measurement history and
results view.
"""

from uuid import UUID
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from carefit.db.database import get_db
from carefit.presentation.results import build_results_view
from carefit.schemas.measurement import MeasurementResponse
from carefit.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from carefit.services.measurement_service import MeasurementService
from carefit.services.user_service import UserService

router = APIRouter()


def _require_user(service: UserService, user_id: UUID) -> dict:
    user = service.get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    """All users, ordered by name."""
    return UserService(db).list()


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
):
    """
    Register a user.

    lastName, firstName, gender and birthDate are required; medicalHistory
    defaults to an empty list.
    """
    try:
        return UserService(db).create(request.to_record())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    """Get a user, 404 if absent."""
    return _require_user(UserService(db), user_id)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: UUID,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    Replace the user fields present in the body.

    Fields left out of the body keep their stored values.
    """
    service = UserService(db)
    _require_user(service, user_id)

    try:
        return service.update(user_id, request.to_record())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UUID, db: Session = Depends(get_db)):
    """
    Delete a user.

    The user's measurements are not deleted.
    """
    service = UserService(db)
    _require_user(service, user_id)
    service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/users/{user_id}/measurements",
    response_model=List[MeasurementResponse],
)
def list_user_measurements(
    user_id: UUID,
    request: Request,
    latest: bool = Query(False, description="Only the most recent visits"),
    limit: Optional[int] = Query(
        None, ge=1, description="Number of visits when latest=true"
    ),
    db: Session = Depends(get_db),
):
    """
    A user's measurement history.

    Full history newest first; with latest=true only the ``limit`` most
    recent visits (default 4), oldest first.
    """
    service = MeasurementService(db)
    if not latest:
        return service.list_by_user(user_id)

    limit = limit or request.app.state.settings.latest_measurements_limit
    return service.list_latest_by_user(user_id, limit=limit)


@router.get("/users/{user_id}/results")
def get_user_results(
    user_id: UUID,
    request: Request,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """
    Results view for a user: summary, per-visit table and chart series over
    the latest visits.
    """
    user = _require_user(UserService(db), user_id)
    limit = limit or request.app.state.settings.latest_measurements_limit
    measurements = MeasurementService(db).list_latest_by_user(user_id, limit=limit)
    return build_results_view(user, measurements, max_items=limit)
