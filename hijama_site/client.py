"""Async submission of form payloads to the configured form endpoint.

The endpoint (a FormEasy / Apps Script web app) receives one POST per
submission. Failures are collapsed into ``SubmissionOutcome.ERROR``; the
cause is only logged.
"""
from __future__ import annotations

import json
from typing import Any

import httpx
from loguru import logger

from .exceptions import SiteError, SubmissionRejected, VerificationError
from .lunar import format_long_date
from .models import (
    AppointmentRequest,
    BookingConfig,
    ContactConfig,
    ContactRequest,
    SubmissionOutcome,
    SubmissionConfig,
)
from .verification import SUBMIT_ACTION, NoVerifier, TokenVerifier, acquire_token

# text/plain keeps the browser request "simple" (no CORS preflight) for the endpoint
CONTENT_TYPE = "text/plain;charset=utf-8"


def appointment_payload(request: AppointmentRequest) -> dict[str, Any]:
    payload = request.model_dump(by_alias=True, exclude_none=True)
    payload["date"] = format_long_date(request.date) if request.date else ""
    return payload


def contact_payload(request: ContactRequest) -> dict[str, Any]:
    return request.model_dump(by_alias=True, exclude_none=True)


async def post_form(endpoint: str, payload: dict[str, Any]) -> httpx.Response:
    """POST the payload once. Raises SubmissionRejected on any failure."""
    headers = {"Content-Type": CONTENT_TYPE}
    try:
        async with httpx.AsyncClient(http2=True, timeout=None, follow_redirects=True) as client:
            resp = await client.post(endpoint, content=json.dumps(payload), headers=headers)
    except httpx.HTTPError as e:
        raise SubmissionRejected(f"Could not reach form endpoint: {e.__class__.__name__}") from e
    if not resp.is_success:
        raise SubmissionRejected("Form endpoint rejected submission", status_code=resp.status_code)
    return resp


async def _submit(payload: dict[str, Any], config: SubmissionConfig, verifier: TokenVerifier) -> SubmissionOutcome:
    try:
        if config.verification_required:
            payload["verificationToken"] = await acquire_token(
                verifier, config.verification_site_key, SUBMIT_ACTION
            )
        await post_form(config.endpoint, payload)
    except VerificationError as e:
        logger.warning(f"Submission aborted, verification failed: {e.__class__.__name__}: {e.message}")
        return SubmissionOutcome.ERROR
    except SiteError as e:
        logger.error(f"Form submission error: {e.to_dict()}")
        return SubmissionOutcome.ERROR

    logger.info(f"Form submitted to {httpx.URL(config.endpoint).host}")
    return SubmissionOutcome.SUCCESS


async def submit_appointment(
    request: AppointmentRequest,
    config: BookingConfig,
    verifier: TokenVerifier | None = None,
) -> SubmissionOutcome:
    """Format, verify and send an appointment request. Never raises for pipeline failures."""
    return await _submit(appointment_payload(request), config, verifier or NoVerifier())


async def submit_contact(
    request: ContactRequest,
    config: ContactConfig,
    verifier: TokenVerifier | None = None,
) -> SubmissionOutcome:
    return await _submit(contact_payload(request), config, verifier or NoVerifier())
