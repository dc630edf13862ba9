from fastapi import FastAPI

from exam_portal.api.exams import router as exams_router
from exam_portal.api.extract import router as extract_router
from exam_portal.api.metrics import router as metrics_router
from exam_portal.config import get_settings
from exam_portal.observability.logging import configure_logging
from exam_portal.observability.middleware import RequestContextMiddleware
from exam_portal.services.exam_service import get_catalog


app = FastAPI(title="Exam Portal", version="0.1.0")
app.add_middleware(RequestContextMiddleware)
app.include_router(exams_router)
app.include_router(extract_router)
app.include_router(metrics_router)


@app.on_event("startup")
def _startup() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    # Fail at startup rather than on first request if EXAMS_FILE is broken.
    get_catalog()


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
