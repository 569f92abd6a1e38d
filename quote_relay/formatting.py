from datetime import datetime
from typing import Optional

from quote_relay.schemas import FormSubmission, MailMessage

SUBJECT_PREFIX = "New Form Submission - Insurance Quote Request #"
NEEDS_FALLBACK = "Not specified"

BODY_TEMPLATE = """\
New Form Submission Received

Details:
Name: {name}
Email: {email}
Phone: {phone}
Insurance Needs: {needs}

Please follow up with the customer as needed."""


def subject_timestamp(now: datetime) -> str:
    """DDMMYYYYHHmm, e.g. 03112025 14:07 -> '031120251407'."""
    return now.strftime("%d%m%Y%H%M")


def build_subject(now: Optional[datetime] = None) -> str:
    return SUBJECT_PREFIX + subject_timestamp(now or datetime.now())


def build_body(form: FormSubmission) -> str:
    return BODY_TEMPLATE.format(
        name=form.name,
        email=form.email,
        phone=form.phone,
        needs=form.needs or NEEDS_FALLBACK,
    )


def build_message(form: FormSubmission, sender: str, to: str, now: Optional[datetime] = None) -> MailMessage:
    return MailMessage(sender=sender, to=to, subject=build_subject(now), body=build_body(form))
