"""Contact form state machine and delivery to the form relay."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Protocol
from urllib.parse import parse_qs, urlsplit

import requests

from .forms import (
    REQUIRED_FIELDS,
    CharacterCounter,
    count_errors,
    error_announcement,
    validate_field,
    validate_form,
)

logger = logging.getLogger(__name__)

UTM_FIELDS = ("utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content")
HONEYPOT_FIELD = "_gotcha"
EDITABLE_FIELDS = ("name", "email", "service", "message", HONEYPOT_FIELD)

SUCCESS_MESSAGE = "Got it! We'll be in touch within a day or two."
FAILURE_MESSAGE = "Something went wrong. Please try again or email us directly."


class FormStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class SubmissionError(RuntimeError):
    """Raised by a submitter when the relay cannot be reached."""


class SubmissionInProgress(RuntimeError):
    """Raised when submit is triggered while a request is still pending."""


class FormSubmitter(Protocol):
    """Delivers a contact payload to the form relay."""

    def submit(self, payload: Dict[str, str]) -> bool:
        """Return True when the relay accepted the submission."""


@dataclass
class HttpFormSubmitter:
    """Posts the payload as JSON to a Formspree-style endpoint."""

    endpoint: str
    timeout: float = 10.0
    session: Optional[requests.Session] = None

    def submit(self, payload: Dict[str, str]) -> bool:
        http = self.session or requests
        logger.info("Submitting contact form to %s", self.endpoint)
        try:
            response = http.post(
                self.endpoint,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SubmissionError(f"Form relay unreachable: {exc}") from exc

        if not response.ok:
            logger.warning(
                "Form relay rejected submission with status %s", response.status_code
            )
        return response.ok


def capture_utm_fields(url: Optional[str]) -> Dict[str, str]:
    """Read campaign attribution parameters from the landing page URL."""
    if not url:
        return {name: "" for name in UTM_FIELDS}
    params = parse_qs(urlsplit(url).query)
    return {name: params.get(name, [""])[0] for name in UTM_FIELDS}


def _initial_touched() -> Dict[str, bool]:
    return {name: False for name in REQUIRED_FIELDS}


@dataclass
class FormState:
    """Field values plus validation and submission status."""

    name: str = ""
    email: str = ""
    service: str = ""
    message: str = ""
    honeypot: str = ""
    errors: Dict[str, Optional[str]] = field(default_factory=dict)
    touched: Dict[str, bool] = field(default_factory=_initial_touched)
    status: FormStatus = FormStatus.IDLE

    def get(self, field_name: str) -> str:
        if field_name == HONEYPOT_FIELD:
            return self.honeypot
        return getattr(self, field_name)

    def set(self, field_name: str, value: str) -> None:
        if field_name == HONEYPOT_FIELD:
            self.honeypot = value
        else:
            setattr(self, field_name, value)

    def values(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "email": self.email,
            "service": self.service,
            "message": self.message,
        }


@dataclass
class SubmissionResult:
    """Outcome of one submit action."""

    status: FormStatus
    sent: bool
    message: str = ""
    error_count: int = 0
    redirect_url: Optional[str] = None
    redirect_delay: float = 0.0


class ContactFormController:
    """Drives a single contact form instance from first keystroke to redirect."""

    def __init__(
        self,
        submitter: FormSubmitter,
        landing_url: Optional[str] = None,
        redirect_url: str = "/success/",
        redirect_delay: float = 1.5,
    ) -> None:
        self.submitter = submitter
        self.redirect_url = redirect_url
        self.redirect_delay = redirect_delay
        self.state = FormState()
        self.utm_fields = capture_utm_fields(landing_url)
        self.announcement = ""
        self.character_announcement = ""
        self.error_message = ""
        self._counter = CharacterCounter()

    @property
    def status(self) -> FormStatus:
        return self.state.status

    @property
    def submit_enabled(self) -> bool:
        return self.state.status is not FormStatus.SUBMITTING

    @property
    def error_summary_visible(self) -> bool:
        all_touched = all(self.state.touched.values())
        return all_touched and count_errors(self.state.errors) > 0

    def _check_field(self, field_name: str) -> None:
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown form field: {field_name}")

    def change(self, field_name: str, value: str) -> None:
        """Store a new value, re-validating only fields already touched."""
        self._check_field(field_name)
        self.state.set(field_name, value)

        if self.state.touched.get(field_name):
            self.state.errors[field_name] = validate_field(field_name, value)

        if field_name == "message":
            announcement = self._counter.update(len(value))
            if announcement:
                self.character_announcement = announcement

    def blur(self, field_name: str) -> None:
        """Mark the field touched and validate its current value."""
        self._check_field(field_name)
        if field_name in REQUIRED_FIELDS:
            self.state.touched[field_name] = True
            self.state.errors[field_name] = validate_field(
                field_name, self.state.get(field_name)
            )

    def visible_error(self, field_name: str) -> Optional[str]:
        """Return the error to display, hiding it until the field is touched."""
        if not self.state.touched.get(field_name):
            return None
        return self.state.errors.get(field_name)

    def build_payload(self) -> Dict[str, str]:
        payload = self.state.values()
        for name, value in self.utm_fields.items():
            if value:
                payload[name] = value
        if self.state.honeypot:
            payload[HONEYPOT_FIELD] = self.state.honeypot
        return payload

    def submit(self) -> SubmissionResult:
        """Validate and, when everything passes, send exactly one request."""
        if self.state.status is FormStatus.SUBMITTING:
            raise SubmissionInProgress("A submission is already in progress.")

        self.state.touched = {name: True for name in REQUIRED_FIELDS}
        self.state.errors = validate_form(self.state.values())
        error_count = count_errors(self.state.errors)
        if error_count:
            self.announcement = error_announcement(error_count)
            logger.debug("Submission blocked by %d validation errors", error_count)
            return SubmissionResult(
                status=self.state.status,
                sent=False,
                message=self.announcement,
                error_count=error_count,
            )

        self.announcement = ""
        self.error_message = ""
        self.state.status = FormStatus.SUBMITTING

        try:
            accepted = self.submitter.submit(self.build_payload())
        except SubmissionError as exc:
            logger.error("Form submission error: %s", exc)
            accepted = False
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected error during form submission.")
            accepted = False

        if not accepted:
            self.state.status = FormStatus.ERROR
            self.error_message = FAILURE_MESSAGE
            return SubmissionResult(
                status=self.state.status, sent=True, message=FAILURE_MESSAGE
            )

        self.state.status = FormStatus.SUCCESS
        logger.info("Contact form submitted; redirecting to %s", self.redirect_url)
        return SubmissionResult(
            status=self.state.status,
            sent=True,
            message=SUCCESS_MESSAGE,
            redirect_url=self.redirect_url,
            redirect_delay=self.redirect_delay,
        )


def schedule_redirect(
    result: SubmissionResult,
    callback: Callable[[str], None],
    timer_factory: Callable[..., threading.Timer] = threading.Timer,
) -> Optional[threading.Timer]:
    """Arm a one-shot timer that follows the redirect of a successful submit."""
    if result.status is not FormStatus.SUCCESS or not result.redirect_url:
        return None
    timer = timer_factory(result.redirect_delay, callback, args=(result.redirect_url,))
    timer.start()
    return timer
