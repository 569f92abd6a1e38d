"""
Insurance Quote Form Relay

Accepts a contact / insurance-quote form POST, validates it and relays it as
an email to a fixed inbox.

Modules:
- main.py          : FastAPI app (uvicorn quote_relay.main:app)
- config.py        : pydantic-settings Settings, read once per process
- handler.py       : FormSubmissionHandler, method gate -> parse -> validate -> send
- parsing.py       : JSON / URL-encoded / multipart bodies -> FormSubmission
- utils/multipart.py : multipart/form-data field parser (python-multipart)
- validation.py    : name / email / phone rules, all errors reported together
- formatting.py    : subject with DDMMYYYYHHmm token, plain-text body
- email.py         : SMTP (aiosmtplib) and SES (boto3) transports
- responses.py     : outcome types and the single outcome -> HTTP response mapping
"""

__version__ = "1.0.0"
