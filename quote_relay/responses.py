import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
JSON_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Content-Type": "application/json",
}

SUCCESS_MESSAGE = "Form submitted successfully!"
INTERNAL_ERROR_MESSAGE = "Internal server error. Please try again."


@dataclass
class HttpResponse:
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def json(self) -> Any:
        return json.loads(self.body)


# ---------------- Outcomes ----------------

@dataclass(frozen=True)
class Preflight:
    pass

@dataclass(frozen=True)
class MethodRejected:
    method: str

@dataclass(frozen=True)
class ValidationFailure:
    errors: List[str]

@dataclass(frozen=True)
class SendFailure:
    error: BaseException

@dataclass(frozen=True)
class Success:
    message_id: Optional[str] = None


Outcome = Union[Preflight, MethodRejected, ValidationFailure, SendFailure, Success]


def _json(status_code: int, payload: Dict[str, Any]) -> HttpResponse:
    return HttpResponse(status_code, dict(JSON_HEADERS), json.dumps(payload))


def build_response(outcome: Outcome, debug: bool = False) -> HttpResponse:
    """Single mapping from a pipeline outcome to the HTTP status and JSON body the form expects."""
    if isinstance(outcome, Preflight):
        return HttpResponse(200, dict(CORS_HEADERS), "")
    if isinstance(outcome, MethodRejected):
        return _json(405, {"status": "error", "message": "Method not allowed"})
    if isinstance(outcome, ValidationFailure):
        return _json(400, {"status": "error", "message": "Validation errors", "errors": list(outcome.errors)})
    if isinstance(outcome, Success):
        return _json(200, {"status": "success", "message": SUCCESS_MESSAGE})
    if isinstance(outcome, SendFailure):
        payload: Dict[str, Any] = {"status": "error", "message": INTERNAL_ERROR_MESSAGE}
        if debug:
            payload["error"] = str(outcome.error)
        return _json(500, payload)
    raise TypeError(f"unknown outcome: {outcome!r}")
