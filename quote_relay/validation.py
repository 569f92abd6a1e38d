import re
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email

from quote_relay.schemas import FormSubmission

NAME_ERROR = "Name is required and must be at least 2 characters"
EMAIL_ERROR = "Valid email is required"
PHONE_ERROR = "Valid phone number is required"

NAME_MIN_LENGTH = 2

# "+1 (555) 555-0123", "07911.123456"; country codes never start with 0
PHONE_RE = re.compile(r"^(?:\+[1-9]|\(?\d)[\d\s().\-]*$")
PHONE_MIN_DIGITS = 8
PHONE_MAX_DIGITS = 15   # E.164 limit


def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(value: Optional[str]) -> bool:
    v = (value or "").strip()
    if not PHONE_RE.match(v):
        return False
    digits = [ch for ch in v if ch.isdigit()]
    if set(digits) == {"0"}:
        return False
    return PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS


def validate_submission(form: FormSubmission) -> List[str]:
    """
    Check every field and return all problems found, in field order.
    An empty list means the submission can be sent. `needs` is optional.
    """
    errs: List[str] = []
    if len((form.name or "").strip()) < NAME_MIN_LENGTH:
        errs.append(NAME_ERROR)
    if not is_valid_email(form.email):
        errs.append(EMAIL_ERROR)
    if not is_valid_phone(form.phone):
        errs.append(PHONE_ERROR)
    return errs
