import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nagar_connect.api.auth import router as auth_router
from nagar_connect.api.departments import router as departments_router
from nagar_connect.api.geocode import router as geocode_router
from nagar_connect.api.issues import router as issues_router
from nagar_connect.api.media import router as media_router
from nagar_connect.core.config import get_settings
from nagar_connect.core.errors import Misconfigured, NagarError
from nagar_connect.db.mongo import ensure_indexes, get_db
from nagar_connect.utils.logging import setup_logging

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)

    missing = settings.missing_required()
    if missing:
        raise Misconfigured(missing)

    await ensure_indexes(get_db())
    if not settings.ai_enabled:
        logger.info("GEMINI_API_KEY not set, image classification runs in filename fallback mode")
    logger.info("%s started (%s)", settings.app_name, settings.env)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NagarError)
async def nagar_error_handler(request: Request, exc: NagarError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = f"Invalid {field}" if field else "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "error": message})


app.include_router(auth_router)
app.include_router(issues_router)
app.include_router(media_router)
app.include_router(geocode_router)
app.include_router(departments_router)


@app.get("/health")
def health():
    return {"ok": True}
