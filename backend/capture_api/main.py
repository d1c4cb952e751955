import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from .access import is_allowed
from .admission import AdmissionQueue
from .cache import LatestCaptureStore
from .config import Settings
from .models import CaptureSuccess
from .options import normalize_options
from .screenshot_service import CaptureService
from .utils import configure_logging

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def message(status_code: int, text: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": text})


def create_app(settings: Optional[Settings] = None, service: Optional[CaptureService] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    if service is None:
        service = CaptureService(
            queue=AdmissionQueue(settings.CONCURRENCY),
            cache=LatestCaptureStore(),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await service.initialize()
        yield
        # Shutdown
        await service.cleanup()

    app = FastAPI(
        title="Site Capture API",
        description="Capture website screenshots and logos",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.capture_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.debug(f"{request.method} {request.url.path} origin={request.headers.get('origin')}")
        return await call_next(request)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return message(500, "Unexpected error occurred")

    async def run_capture(request: Request, work) -> Response:
        query = dict(request.query_params)
        if not is_allowed(query, settings.SECRET):
            logger.info(f"Request not allowed: {request.url.path}")
            return message(403, "Unauthorized request")

        options = normalize_options(query, settings.DEFAULT_TIMEOUT_SECONDS)
        if not options.url:
            return message(400, "Missing required parameter: url")

        try:
            result = await work(options)
        except Exception:
            logger.exception(f"Capture error for {options.url}")
            return message(500, "Unexpected error occurred")

        if isinstance(result, CaptureSuccess):
            return Response(content=result.content, media_type=f"image/{result.image_format}")
        return message(result.status_code, result.message)

    @app.get("/capture")
    async def capture(request: Request):
        """Capture a screenshot of the given url"""
        return await run_capture(request, service.capture)

    @app.get("/logo")
    async def logo(request: Request):
        """Extract the logo of the given url"""
        return await run_capture(request, service.extract_logo)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy" if service.health_check() else "unhealthy",
            "service": "site-capture-api",
            "queue": service.queue.stats(),
        }

    @app.get("/results", response_class=HTMLResponse)
    async def latest_capture_page(request: Request):
        if not settings.SHOW_RESULTS:
            raise HTTPException(status_code=404, detail="Not Found")
        return templates.TemplateResponse(
            request,
            "latest.html",
            {"latest": service.cache.latest, "latest_endpoint": "/latest"},
        )

    @app.get("/latest")
    async def latest_capture():
        if not settings.SHOW_RESULTS:
            raise HTTPException(status_code=404, detail="Not Found")
        latest = service.cache.latest
        if latest is None:
            return message(404, "No capture found")
        return Response(content=latest.content, media_type="image/png")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.HOST, port=app.state.settings.PORT)
