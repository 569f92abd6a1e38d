from functools import lru_cache

from fastapi import APIRouter, Depends, Request, Response

from quote_relay.config import get_settings
from quote_relay.handler import FormSubmissionHandler, HttpRequest

router = APIRouter(tags=["submissions"])

METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@lru_cache
def get_handler() -> FormSubmissionHandler:
    return FormSubmissionHandler(get_settings())


# every verb is routed here; method gating belongs to the handler
@router.api_route("/api/submit-form", methods=METHODS)
@router.api_route("/.netlify/functions/submit-form", methods=METHODS, include_in_schema=False)
async def submit_form(request: Request, handler: FormSubmissionHandler = Depends(get_handler)):
    result = await handler.handle(
        HttpRequest(method=request.method, headers=dict(request.headers), body=await request.body())
    )
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)
