"""Shared fixtures: settings without a .env file and an in-memory mail transport."""

from datetime import datetime
from typing import List, Optional

import pytest

from quote_relay.config import Settings
from quote_relay.email import Mailer
from quote_relay.errors import SendError
from quote_relay.handler import FormSubmissionHandler
from quote_relay.schemas import MailMessage

FIXED_NOW = datetime(2025, 11, 3, 14, 7, 42)


class FakeMailer(Mailer):
    def __init__(self, fail_with: Optional[Exception] = None):
        self.sent: List[MailMessage] = []
        self.fail_with = fail_with

    async def send(self, message: MailMessage) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message)
        return f"<fake-{len(self.sent)}@test>"


def make_settings(**overrides) -> Settings:
    values = dict(
        MAIL_TRANSPORT="smtp",
        MAIL_USERNAME="quotes@acme-insurance.com",
        MAIL_PASSWORD="app-password",
        EMAIL_TO="sales@acme-insurance.com",
        DEBUG=False,
        NODE_ENV=None,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def handler(settings: Settings, mailer: FakeMailer) -> FormSubmissionHandler:
    return FormSubmissionHandler(settings, mailer=mailer, clock=lambda: FIXED_NOW)


@pytest.fixture
def failing_mailer() -> FakeMailer:
    return FakeMailer(fail_with=SendError("SMTP send failed: connection refused"))
