"""
HTML pages.

Pages are rendered from Jinja2 templates and load their data in the browser
from the JSON API; nothing here touches the database.
"""

from datetime import date
from pathlib import Path
from uuid import UUID
from typing import Optional
from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from carefit.domain.metrics import GENDER_OPTIONS, MEDICAL_HISTORY_OPTIONS, PAIRED_METRICS
from carefit.services.derived_values import format_date

API_BASE = "/api/v1"

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["format_date"] = format_date

router = APIRouter(include_in_schema=False)


def _render(request: Request, name: str, page: str, **context):
    settings = request.app.state.settings
    context.update(
        {
            "page": page,
            "api_base": API_BASE,
            "operator_id": settings.operator_id,
            "latest_limit": settings.latest_measurements_limit,
            "today": date.today(),
        }
    )
    return templates.TemplateResponse(request, name, context)


@router.get("/", response_class=HTMLResponse)
def user_list_page(request: Request):
    return _render(request, "users.html", "user-list")


@router.get("/user/create", response_class=HTMLResponse)
def user_create_page(request: Request):
    return _render(
        request,
        "user_form.html",
        "user-form",
        user_id=None,
        gender_options=GENDER_OPTIONS,
        medical_history_options=MEDICAL_HISTORY_OPTIONS,
    )


@router.get("/user/edit/{user_id}", response_class=HTMLResponse)
def user_edit_page(request: Request, user_id: UUID):
    return _render(
        request,
        "user_form.html",
        "user-form",
        user_id=str(user_id),
        gender_options=GENDER_OPTIONS,
        medical_history_options=MEDICAL_HISTORY_OPTIONS,
    )


@router.get("/measurement/new", response_class=HTMLResponse)
def measurement_new_page(
    request: Request,
    user_id: Optional[UUID] = Query(None, alias="userId"),
):
    return _render(
        request,
        "measurement_form.html",
        "measurement-form",
        user_id=str(user_id) if user_id else None,
        paired_metrics=PAIRED_METRICS,
    )


@router.get("/result/{user_id}", response_class=HTMLResponse)
def result_page(request: Request, user_id: UUID):
    return _render(request, "result.html", "result", user_id=str(user_id))
