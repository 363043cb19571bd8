from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, ValidationError

from .content import Page, load_pages
from .exceptions import DateOutOfRange, OutOfRangeDate
from .forms import AppointmentForm, ContactForm
from .logging_config import setup_logging
from .lunar import (
    FIRST_SUPPORTED,
    LAST_SUPPORTED,
    booking_window,
    describe_date,
    recommended_days_in_month,
)
from .models import (
    AppointmentFormFields,
    AppointmentRequest,
    BookingWindow,
    ContactFormFields,
    ContactRequest,
    DateInfo,
    RenderedModule,
)
from .modules import APPOINTMENT_FORM, CONTACT_FORM, build_registry
from .registry import ModuleRegistry
from .settings import Settings, get_settings
from .verification import ClientTokenVerifier


class PageResp(BaseModel):
    slug: str
    title: str
    modules: list[RenderedModule]


class SubmitResp(BaseModel):
    status: str
    message: Optional[str] = None


setup_logging(get_settings().log_level)

app = FastAPI(title="Hijama Site Engine")


def get_today() -> date:
    return date.today()


def get_registry(today: date = Depends(get_today)) -> ModuleRegistry:
    return build_registry(lambda: today)


@lru_cache
def _cached_pages(path: str) -> dict[str, Page]:
    return load_pages(Path(path))


def get_pages(settings: Settings = Depends(get_settings)) -> dict[str, Page]:
    return _cached_pages(str(settings.content_path))


def _page_or_404(pages: dict[str, Page], slug: str) -> Page:
    page = pages.get(slug)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


# Rendering -----------------------------------------------------------------

@app.get("/pages/{slug}", response_model=PageResp)
async def render_page(
    slug: str,
    pages: dict[str, Page] = Depends(get_pages),
    registry: ModuleRegistry = Depends(get_registry),
):
    """Render a page's modules in order; unknown module types are left out."""
    page = _page_or_404(pages, slug)
    return PageResp(slug=page.slug, title=page.title, modules=registry.resolve(page.modules))


@app.post("/render", response_model=list[RenderedModule])
async def render_modules(
    modules: list[dict[str, Any]] = Body(...),
    registry: ModuleRegistry = Depends(get_registry),
):
    return registry.resolve(modules)


# Calendar advisor ------------------------------------------------------------

@app.get("/booking/window", response_model=BookingWindow)
async def get_booking_window(today: date = Depends(get_today)):
    return booking_window(today)


@app.get("/booking/date-info", response_model=DateInfo)
async def get_date_info(day: date = Query(..., alias="date", description="YYYY-MM-DD")):
    try:
        return describe_date(day)
    except OutOfRangeDate as e:
        raise HTTPException(status_code=422, detail=e.message)


@app.get("/booking/recommended-days", response_model=list[date])
async def get_recommended_days(
    year: int = Query(..., ge=FIRST_SUPPORTED.year, le=LAST_SUPPORTED.year),
    month: int = Query(..., ge=1, le=12),
):
    try:
        return recommended_days_in_month(year, month)
    except OutOfRangeDate as e:
        raise HTTPException(status_code=422, detail=e.message)


# Submissions -------------------------------------------------------------------

def _module_fields(page: Page, key: str, type_tag: str, model):
    module = page.find_module(key, type_tag)
    if module is None:
        raise HTTPException(status_code=404, detail="Form not found")
    try:
        return model.model_validate(module.fields)
    except ValidationError:
        raise HTTPException(status_code=404, detail="Form is not configured")


@app.post("/pages/{slug}/appointments/{key}", response_model=SubmitResp)
async def book_appointment(
    slug: str,
    key: str,
    req: AppointmentRequest,
    pages: dict[str, Page] = Depends(get_pages),
    settings: Settings = Depends(get_settings),
    today: date = Depends(get_today),
):
    """Submit an appointment through the page's appointment form module."""
    fields = _module_fields(_page_or_404(pages, slug), key, APPOINTMENT_FORM, AppointmentFormFields)
    config = fields.booking_config(settings.verification_site_key)
    if req.service and req.service not in {s.name for s in config.service_types}:
        raise HTTPException(status_code=422, detail="Unknown service")

    form = AppointmentForm(config, today=lambda: today)
    try:
        form.update(**req.model_dump(exclude={"verification_token"}, exclude_unset=True))
        outcome = await form.submit(ClientTokenVerifier(req.verification_token))
    except DateOutOfRange as e:
        raise HTTPException(status_code=422, detail=e.message)
    finally:
        form.close()
    return SubmitResp(status=outcome.value, message=form.message)


@app.post("/pages/{slug}/contact/{key}", response_model=SubmitResp)
async def send_contact(
    slug: str,
    key: str,
    req: ContactRequest,
    pages: dict[str, Page] = Depends(get_pages),
    settings: Settings = Depends(get_settings),
):
    fields = _module_fields(_page_or_404(pages, slug), key, CONTACT_FORM, ContactFormFields)
    config = fields.contact_config(settings.verification_site_key)

    form = ContactForm(config)
    try:
        form.update(**req.model_dump(exclude={"verification_token"}, exclude_unset=True))
        outcome = await form.submit(ClientTokenVerifier(req.verification_token))
    finally:
        form.close()
    return SubmitResp(status=outcome.value, message=form.message)
