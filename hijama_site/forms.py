"""Interactive form state: fields, derived panels and the submit lifecycle.

    idle -> submitting -> success | error -> idle (after AUTO_RESET_SECONDS)

A form instance lives on one asyncio event loop. The ``submitting`` state
refuses edits and new submissions; success/error accept edits and a fresh
submit, which cancels the pending reset.
"""
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Generic, Optional, TypeVar

from loguru import logger

from .client import submit_appointment, submit_contact
from .exceptions import FormBusy
from .lunar import booking_window, check_booking_date, describe_date
from .models import (
    AppointmentRequest,
    BookingConfig,
    BookingWindow,
    ContactConfig,
    ContactRequest,
    DateInfo,
    SubmissionOutcome,
)
from .verification import TokenVerifier

AUTO_RESET_SECONDS = 5.0

RequestT = TypeVar("RequestT", AppointmentRequest, ContactRequest)
ConfigT = TypeVar("ConfigT", BookingConfig, ContactConfig)


class _Form(ABC, Generic[RequestT, ConfigT]):
    def __init__(
        self,
        config: ConfigT,
        verifier: Optional[TokenVerifier] = None,
        reset_delay: float = AUTO_RESET_SECONDS,
    ):
        self.config = config
        self.verifier = verifier
        self.reset_delay = reset_delay
        self.status = SubmissionOutcome.IDLE
        self._request: RequestT = self._blank()
        self._reset_handle: Optional[asyncio.TimerHandle] = None

    # subclasses -----------------------------------------------------------

    @abstractmethod
    def _blank(self) -> RequestT:
        ...

    @abstractmethod
    async def _send(self, request: RequestT, verifier: Optional[TokenVerifier]) -> SubmissionOutcome:
        ...

    # state ------------------------------------------------------------------

    @property
    def request(self) -> RequestT:
        return self._request.model_copy()

    @property
    def submitting(self) -> bool:
        return self.status is SubmissionOutcome.SUBMITTING

    @property
    def message(self) -> Optional[str]:
        if self.status is SubmissionOutcome.SUCCESS:
            return self.config.success_message
        if self.status is SubmissionOutcome.ERROR:
            return self.config.error_message
        return None

    def _ensure_idle_or_settled(self) -> None:
        if self.submitting:
            raise FormBusy()

    def _transition(self, status: SubmissionOutcome) -> None:
        self._cancel_reset()
        logger.debug(f"{self.__class__.__name__}: {self.status.value} -> {status.value}")
        self.status = status
        if status in (SubmissionOutcome.SUCCESS, SubmissionOutcome.ERROR):
            loop = asyncio.get_running_loop()
            self._reset_handle = loop.call_later(self.reset_delay, self._auto_reset)

    def _auto_reset(self) -> None:
        self._reset_handle = None
        if self.status in (SubmissionOutcome.SUCCESS, SubmissionOutcome.ERROR):
            logger.debug(f"{self.__class__.__name__}: {self.status.value} -> idle (auto reset)")
            self.status = SubmissionOutcome.IDLE

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def close(self) -> None:
        """Drop any pending auto reset."""
        self._cancel_reset()

    def _merged(self, fields: dict[str, Any]) -> RequestT:
        """Validate the edit against the whole request without touching the form."""
        unknown = set(fields) - set(type(self._request).model_fields)
        if unknown:
            raise ValueError(f"Unknown form field(s): {', '.join(sorted(unknown))}")
        return self._request.model_validate({**self._request.model_dump(), **fields})

    def update(self, **fields: Any) -> None:
        self._ensure_idle_or_settled()
        self._request = self._merged(fields)

    async def submit(self, verifier: Optional[TokenVerifier] = None) -> SubmissionOutcome:
        """Run one submission. The outcome decides the next state."""
        self._ensure_idle_or_settled()
        frozen = self._request.model_copy(deep=True)
        self._transition(SubmissionOutcome.SUBMITTING)
        try:
            outcome = await self._send(frozen, verifier or self.verifier)
        except Exception:
            logger.exception("Unexpected error during form submission")
            outcome = SubmissionOutcome.ERROR
        if outcome is SubmissionOutcome.SUCCESS:
            self._request = self._blank()
            self._on_cleared()
        self._transition(outcome)
        return outcome

    def _on_cleared(self) -> None:
        pass


class AppointmentForm(_Form[AppointmentRequest, BookingConfig]):
    """Booking form with the Hijri date advisor and collapsible prep panel."""

    def __init__(
        self,
        config: BookingConfig,
        verifier: Optional[TokenVerifier] = None,
        today: Callable[[], date] = date.today,
        reset_delay: float = AUTO_RESET_SECONDS,
    ):
        self._today = today
        self.date_info: Optional[DateInfo] = None
        self.instructions_open = False
        super().__init__(config, verifier, reset_delay)

    def _blank(self) -> AppointmentRequest:
        return AppointmentRequest(service=self.config.default_service)

    def _on_cleared(self) -> None:
        self.date_info = None

    @property
    def window(self) -> BookingWindow:
        return booking_window(self._today())

    def update(self, **fields: Any) -> None:
        """Apply edits all at once; a date change also refreshes the date panel."""
        self._ensure_idle_or_settled()
        request = self._merged(fields)
        date_info = self.date_info
        if "date" in fields:
            date_info = None
            if request.date is not None:
                check_booking_date(request.date, self._today())
                date_info = describe_date(request.date)
        self._request = request
        self.date_info = date_info

    def select_date(self, selected: Optional[date]) -> Optional[DateInfo]:
        """Set the appointment date and refresh the advisory date panel."""
        self.update(date=selected)
        return self.date_info

    def toggle_instructions(self) -> bool:
        self.instructions_open = not self.instructions_open
        return self.instructions_open

    async def _send(self, request: AppointmentRequest, verifier: Optional[TokenVerifier]) -> SubmissionOutcome:
        return await submit_appointment(request, self.config, verifier)


class ContactForm(_Form[ContactRequest, ContactConfig]):
    def _blank(self) -> ContactRequest:
        return ContactRequest(reason=self.config.default_reason)

    async def _send(self, request: ContactRequest, verifier: Optional[TokenVerifier]) -> SubmissionOutcome:
        return await submit_contact(request, self.config, verifier)

