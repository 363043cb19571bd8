from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


def _require_https(url: str) -> str:
    if not url.lower().startswith("https://"):
        raise ValueError("endpoint must be an https URL")
    return url


def _require_unique_names(services: list) -> list:
    names = [s.name for s in services]
    if len(names) != len(set(names)):
        raise ValueError("service names must be unique within a form")
    return services


class SubmissionOutcome(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class ModuleInstance(BaseModel):
    """One content block from a page's ordered module list."""
    type_tag: str = Field(alias="_type")
    key: str = Field(alias="_key")
    fields: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _collect_fields(cls, data: Any) -> Any:
        # content documents keep their fields inline next to _type/_key
        if isinstance(data, dict) and "fields" not in data:
            reserved = {"_type", "_key", "type_tag", "key"}
            data = {
                **{k: v for k, v in data.items() if k in reserved},
                "fields": {k: v for k, v in data.items() if k not in reserved},
            }
        return data


class RenderedModule(BaseModel):
    key: str
    type: str
    data: dict[str, Any]


class ServiceType(BaseModel):
    name: str
    duration: int = Field(ge=15)  # minutes
    price: str | None = None

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        label = f"{self.name} - {self.duration} min"
        if self.price:
            label += f" - {self.price}"
        return label


class HijriDate(BaseModel):
    day: int = Field(ge=1, le=30)
    month: str
    year: int

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.day} {self.month} {self.year}"


class DateInfo(BaseModel):
    """Advisory panel shown once a date is picked."""
    hijri: HijriDate
    is_recommended: bool


class BookingWindow(BaseModel):
    min_date: dt.date
    max_date: dt.date

    def __contains__(self, day: dt.date) -> bool:
        return self.min_date <= day <= self.max_date


class AppointmentRequest(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    service: str = ""
    date: dt.date | None = None
    time: str = ""
    additional_notes: str = Field(default="", alias="additionalNotes")
    verification_token: str | None = Field(default=None, alias="verificationToken")

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
    }


class ContactRequest(BaseModel):
    name: str = ""
    email: str = ""
    message: str = ""
    reason: str = ""
    verification_token: str | None = Field(default=None, alias="verificationToken")

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
    }


class SubmissionConfig(BaseModel):
    endpoint: str
    show_verification: bool = Field(default=True, alias="showVerification")
    verification_site_key: str | None = Field(default=None, alias="verificationSiteKey")
    success_message: str = Field(default="Thank you! We'll be in touch.", alias="successMessage")
    error_message: str = Field(default="Something went wrong. Try again.", alias="errorMessage")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("endpoint")
    @classmethod
    def _https_endpoint(cls, v: str) -> str:
        return _require_https(v)

    @property
    def verification_required(self) -> bool:
        return self.show_verification and bool(self.verification_site_key)


class BookingConfig(SubmissionConfig):
    service_types: list[ServiceType] = Field(default_factory=list, alias="serviceTypes")
    time_slots: list[str] = Field(default_factory=list, alias="timeSlots")
    success_message: str = Field(
        default="Thank you for booking! We'll confirm your appointment once the deposit is received.",
        alias="successMessage",
    )
    error_message: str = Field(
        default="Something went wrong. Please try again or call us directly.",
        alias="errorMessage",
    )

    @field_validator("service_types")
    @classmethod
    def _unique_service_names(cls, services: list[ServiceType]) -> list[ServiceType]:
        return _require_unique_names(services)

    @property
    def default_service(self) -> str:
        return self.service_types[0].name if self.service_types else ""


class ContactConfig(SubmissionConfig):
    reason_options: list[str] = Field(default_factory=list, alias="reasonOptions")

    @property
    def default_reason(self) -> str:
        return self.reason_options[0] if self.reason_options else "contact"


# Module field shapes -------------------------------------------------------

class _ModuleFields(BaseModel):
    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class LocationInfo(_ModuleFields):
    address: str = "1211 South Washington Ave\nPiscataway, NJ 08854"
    map_url: str | None = Field(default=None, alias="mapUrl")


class PaymentMethod(_ModuleFields):
    method: str = ""
    recipient: str = ""
    details: str = ""


class PaymentInfo(_ModuleFields):
    deposit_required: bool = Field(default=True, alias="depositRequired")
    deposit_amount: str = Field(default="$25", alias="depositAmount")
    payment_methods: list[PaymentMethod] = Field(default_factory=list, alias="paymentMethods")


class PrepInstructions(_ModuleFields):
    title: str = "Hijama Prep Instructions"
    bring_items: list[str] = Field(default_factory=list, alias="bringItems")
    wear_items: list[str] = Field(default_factory=list, alias="wearItems")
    before_session: list[str] = Field(default_factory=list, alias="beforeSession")
    special_notes: list[str] = Field(default_factory=list, alias="specialNotes")


class FormMessages(_ModuleFields):
    success: str | None = None
    error: str | None = None


DEFAULT_SERVICE_TYPES = [
    {"name": "General Hijama Session", "duration": 60, "price": "$80"},
    {"name": "Targeted Pain Relief", "duration": 45, "price": "$60"},
    {"name": "Detox Session", "duration": 90, "price": "$120"},
]

DEFAULT_TIME_SLOTS = ["9:00 AM", "10:30 AM", "12:00 PM", "2:00 PM", "3:30 PM", "5:00 PM", "6:30 PM"]


class AppointmentFormFields(_ModuleFields):
    title: str = "Book Your Hijama Appointment"
    description: str = "Schedule your Hijama session with our experienced practitioner"
    endpoint: str
    show_recaptcha: bool = Field(default=True, alias="showRecaptcha")
    service_types: list[ServiceType] = Field(
        default_factory=lambda: [ServiceType(**s) for s in DEFAULT_SERVICE_TYPES],
        alias="serviceTypes",
    )
    time_slots: list[str] = Field(default_factory=lambda: list(DEFAULT_TIME_SLOTS), alias="timeSlots")
    location_info: LocationInfo | None = Field(default=None, alias="locationInfo")
    payment_info: PaymentInfo | None = Field(default=None, alias="paymentInfo")
    prep_instructions: PrepInstructions | None = Field(default=None, alias="prepInstructions")
    messages: FormMessages = Field(default_factory=FormMessages)

    @field_validator("endpoint")
    @classmethod
    def _https_endpoint(cls, v: str) -> str:
        return _require_https(v)

    @field_validator("service_types")
    @classmethod
    def _unique_service_names(cls, services: list[ServiceType]) -> list[ServiceType]:
        return _require_unique_names(services)

    def booking_config(self, site_key: str | None) -> BookingConfig:
        overrides = {}
        if self.messages.success:
            overrides["success_message"] = self.messages.success
        if self.messages.error:
            overrides["error_message"] = self.messages.error
        return BookingConfig(
            endpoint=self.endpoint,
            show_verification=self.show_recaptcha,
            verification_site_key=site_key,
            service_types=self.service_types,
            time_slots=self.time_slots,
            **overrides,
        )


class ContactFormFields(_ModuleFields):
    title: str = "Contact Us"
    description: str | None = None
    endpoint: str
    show_recaptcha: bool = Field(default=True, alias="showRecaptcha")
    reason_options: list[str] = Field(default_factory=list, alias="reasonOptions")

    @field_validator("endpoint")
    @classmethod
    def _https_endpoint(cls, v: str) -> str:
        return _require_https(v)

    @property
    def reasons(self) -> list[str]:
        return self.reason_options or ["contact", "feedback", "referral"]

    def contact_config(self, site_key: str | None) -> ContactConfig:
        return ContactConfig(
            endpoint=self.endpoint,
            show_verification=self.show_recaptcha,
            verification_site_key=site_key,
            reason_options=self.reasons,
        )


class TextHighlightFields(_ModuleFields):
    pretitle: str | None = None
    text: str = Field(min_length=10)
    alignment: Literal["left", "center", "right"] = "center"
