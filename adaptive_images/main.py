from __future__ import annotations

from fastapi import FastAPI

from adaptive_images.application.dtos.common_dto import HealthResponse, RootResponse
from adaptive_images.infrastructure.api.middlewares import add_default_middlewares
from adaptive_images.infrastructure.api.routes.image_routes import router as image_router
from adaptive_images.infrastructure.config.settings import get_settings
from adaptive_images.infrastructure.logging_config import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Adaptive Images",
        version="0.1.0",
        description="""
        ## Adaptive Images

        Serves copies of images resized to the client's screen width. Widths are
        bucketed into configured break-points and every resized copy is cached on
        disk under `{cache_path}/{break-point}/{image path}`.

        ### Client width
        - **resolution cookie**: the screen width stored by the page's script
        - **User-Agent**: desktop clients get the largest break-point, others
          the smallest when mobile-first is enabled

        ### Errors
        Missing or broken images are answered with a generated JPEG showing the
        error message (404 or 500), so they stay visible inside `<img>` tags.
        """,
    )
    add_default_middlewares(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the service",
    )
    def root():
        """Get API root information."""
        return RootResponse(
            status="ok",
            service="adaptive-images",
            version=app.version,
            breakpoints=list(get_settings().to_config().breakpoints),
        )

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the service is running",
    )
    def health():
        """Check API health status."""
        return HealthResponse(status="healthy")

    # catch-all image route goes last
    app.include_router(image_router)
    return app


app = create_app()
