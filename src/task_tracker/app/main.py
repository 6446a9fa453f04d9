# task_tracker/app/main.py
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.audit_client import AuditClient
from .api import router as tasks_router
from .config import Settings, settings as default_settings
from .storage import InMemoryTaskStorage


# --- базовый логгер (stdout контейнера) ---

logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("task_tracker")


def create_app(
    storage: Optional[InMemoryTaskStorage] = None,
    settings: Optional[Settings] = None,
    audit: Optional[AuditClient] = None,
) -> FastAPI:
    """
    Собирает приложение вокруг одного хранилища.
    Хранилище передаётся явно, глобального состояния нет.
    """
    settings = settings or default_settings
    storage = storage if storage is not None else InMemoryTaskStorage()
    audit = audit or AuditClient(
        service_name=settings.PROJECT_NAME,
        base_url=settings.AUDIT_URL,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "%s started, audit=%s",
            settings.PROJECT_NAME,
            "on" if audit.enabled else "off",
        )
        yield
        await audit.aclose()
        logger.info("%s stopped", settings.PROJECT_NAME)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.audit = audit

    # --- middleware для trace_id ---
    @app.middleware("http")
    async def trace_id_middleware(request: Request, call_next):
        """
        Берём X-Trace-Id из запроса или генерируем новый,
        сохраняем в request.state.trace_id и возвращаем в заголовке ответа.
        """
        incoming_trace_id = request.headers.get("X-Trace-Id")
        trace_id = incoming_trace_id or str(uuid.uuid4())

        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers["X-Trace-Id"] = trace_id
        return response

    # --- плохой ввод: 400 вместо стандартного 422 ---
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        bad_id = any(tuple(err.get("loc", ()))[:1] == ("path",) for err in exc.errors())
        detail = "Invalid task id" if bad_id else "Invalid input"
        logger.info(
            "Rejected %s %s: %s trace_id=%s",
            request.method,
            request.url.path,
            detail,
            getattr(request.state, "trace_id", None),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": detail},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": settings.PROJECT_NAME}

    app.include_router(tasks_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
