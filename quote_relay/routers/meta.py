
from fastapi import APIRouter
from quote_relay.config import get_settings
from datetime import datetime, timezone

router = APIRouter(prefix="/api", tags=["meta"])

@router.get("/health")
def health():
    s = get_settings()
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "transport": s.MAIL_TRANSPORT,
        "mail_configured": not s.missing_mail_settings(),
    }
