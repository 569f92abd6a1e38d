import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Optional, Union

from quote_relay.config import Settings
from quote_relay.email import Mailer, build_mailer
from quote_relay.errors import ConfigurationError, FormRelayError, MethodNotAllowed, ValidationError
from quote_relay.formatting import build_message
from quote_relay.parsing import parse_body
from quote_relay.responses import (
    HttpResponse,
    MethodRejected,
    Outcome,
    Preflight,
    SendFailure,
    Success,
    ValidationFailure,
    build_response,
)
from quote_relay.schemas import FormSubmission
from quote_relay.validation import validate_submission

LOG = logging.getLogger("quote_relay.handler")


@dataclass
class HttpRequest:
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Union[bytes, str, None] = None

    def header(self, name: str, default: str = "") -> str:
        name = name.lower()
        for k, v in self.headers.items():
            if k.lower() == name:
                return v
        return default


class FormSubmissionHandler:
    """
    Relays one quote-request form POST as an email.

    OPTIONS -> CORS preflight, anything but POST -> 405. A POST is checked for
    mail settings first, then parsed, validated, formatted and sent; every
    outcome is turned into exactly one HttpResponse by build_response().
    """

    def __init__(
        self,
        settings: Settings,
        mailer: Optional[Mailer] = None,
        mailer_factory: Callable[[Settings], Mailer] = build_mailer,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings
        self._mailer = mailer
        self._mailer_factory = mailer_factory
        self._clock = clock

    async def handle(self, request: HttpRequest) -> HttpResponse:
        return build_response(await self.process(request), debug=self.settings.debug_enabled)

    async def process(self, request: HttpRequest) -> Outcome:
        method = (request.method or "").upper()
        LOG.info("Function invoked: %s", {
            "httpMethod": method,
            "contentType": request.header("content-type"),
            "hasBody": bool(request.body),
        })

        if method == "OPTIONS":
            LOG.info("Handling OPTIONS request")
            return Preflight()

        try:
            self._gate(method)
        except MethodNotAllowed as e:
            LOG.warning("Method not allowed: %s", e.method)
            return MethodRejected(e.method)

        try:
            message_id = await self._submit(request)
        except ValidationError as e:
            LOG.warning("Validation errors: %s", e.errors)
            return ValidationFailure(e.errors)
        except FormRelayError as e:
            LOG.error("Error processing form: %s", {"type": type(e).__name__, "message": str(e)})
            return SendFailure(e)
        except Exception as e:
            LOG.exception("Unexpected error processing form")
            return SendFailure(e)

        LOG.info("Email sent successfully: %s", {"messageId": message_id})
        return Success(message_id)

    def _gate(self, method: str) -> None:
        if method != "POST":
            raise MethodNotAllowed(method)

    def _mailer_for_request(self) -> Mailer:
        if self._mailer is None:
            self._mailer = self._mailer_factory(self.settings)
        return self._mailer

    async def _submit(self, request: HttpRequest) -> str:
        missing = self.settings.missing_mail_settings()
        if missing:
            LOG.error("Missing environment variables: %s", missing)
            raise ConfigurationError(missing)

        form = parse_body(request.body, request.header("content-type"))
        LOG.info("Form data received: %s", form.model_dump())

        errors = validate_submission(form)
        if errors:
            raise ValidationError(errors)

        return await self.send(form)

    async def send(self, form: FormSubmission) -> str:
        mailer = self._mailer_for_request()
        message = build_message(
            form,
            sender=self.settings.MAIL_USERNAME or "",
            to=self.settings.recipient,
            now=self._clock(),
        )
        LOG.info("Sending email with options: %s", {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
        })
        return await mailer.send(message)
