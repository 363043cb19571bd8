"""Handlers for the module kinds this site knows how to render."""
from __future__ import annotations

from datetime import date
from typing import Any, Callable, Mapping

from .lunar import booking_window, format_short_date, recommended_days_in_month
from .models import AppointmentFormFields, ContactFormFields, TextHighlightFields
from .registry import ModuleRegistry

APPOINTMENT_FORM = "appointment-form-module"
CONTACT_FORM = "contact-form-module"
TEXT_HIGHLIGHT = "text-highlight-module"

Today = Callable[[], date]


def appointment_form_handler(today: Today = date.today):
    def render(fields: Mapping[str, Any], key: str) -> dict[str, Any]:
        form = AppointmentFormFields.model_validate(fields)
        now = today()
        window = booking_window(now)
        config = form.booking_config(None)
        data: dict[str, Any] = {
            "title": form.title,
            "description": form.description,
            "showRecaptcha": form.show_recaptcha,
            "services": [{"value": s.name, "label": s.label} for s in form.service_types],
            "defaultService": config.default_service,
            "timeSlots": list(form.time_slots),
            "minDate": window.min_date.isoformat(),
            "maxDate": window.max_date.isoformat(),
            "recommendedDays": [
                {"date": d.isoformat(), "label": format_short_date(d)}
                for d in recommended_days_in_month(now.year, now.month)
            ],
            "messages": {
                "success": config.success_message,
                "error": config.error_message,
            },
        }
        if form.location_info:
            data["location"] = form.location_info.model_dump(by_alias=True)
        if form.payment_info:
            data["payment"] = form.payment_info.model_dump(by_alias=True)
        if form.prep_instructions:
            data["prepInstructions"] = form.prep_instructions.model_dump(by_alias=True)
        return data

    return render


def contact_form_handler(fields: Mapping[str, Any], key: str) -> dict[str, Any]:
    form = ContactFormFields.model_validate(fields)
    return {
        "title": form.title,
        "description": form.description,
        "showRecaptcha": form.show_recaptcha,
        "reasons": [{"value": r, "label": r[:1].upper() + r[1:]} for r in form.reasons],
        "defaultReason": form.reasons[0],
    }


def text_highlight_handler(fields: Mapping[str, Any], key: str) -> dict[str, Any]:
    return TextHighlightFields.model_validate(fields).model_dump()


def build_registry(today: Today = date.today) -> ModuleRegistry:
    registry = ModuleRegistry()
    registry.register(APPOINTMENT_FORM, appointment_form_handler(today))
    registry.register(CONTACT_FORM, contact_form_handler)
    registry.register(TEXT_HIGHLIGHT, text_highlight_handler)
    return registry
