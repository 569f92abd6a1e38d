import logging

from fastapi import FastAPI

from quote_relay.config import get_settings

from quote_relay.routers.meta         import router as meta_router
from quote_relay.routers.submissions  import router as submissions_router

s = get_settings()
logging.basicConfig(level=s.LOG_LEVEL.upper(), format="%(asctime)s [%(levelname)s] %(message)s")

app = FastAPI(title=s.APP_TITLE)

# CORS headers are written by the submission handler itself: the form endpoint
# answers every preflight with a fixed header set and an empty body.
app.include_router(meta_router)
app.include_router(submissions_router)

@app.get("/", tags=["root"])
def read_root():
    return {"message": "Insurance quote form relay"}
