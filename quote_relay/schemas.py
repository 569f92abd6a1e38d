
from typing import Optional
from pydantic import BaseModel, ConfigDict

FORM_FIELDS = ("name", "email", "phone", "needs")

class FormSubmission(BaseModel):
    # raw values as submitted; checks live in validation.py so all errors are reported together
    model_config = ConfigDict(frozen=True)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    needs: Optional[str] = None

class MailMessage(BaseModel):
    model_config = ConfigDict(frozen=True)
    sender: str
    to: str
    subject: str
    body: str
