from __future__ import annotations

import time
from email.utils import formatdate
from pathlib import PurePosixPath

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, Response

from adaptive_images.application.dtos.common_dto import ErrorResponse
from adaptive_images.application.use_cases.serve_adaptive_image import (
    ImageOutcome,
    ServeAdaptiveImageUseCase,
)
from adaptive_images.infrastructure.api.dependencies import get_serve_use_case
from adaptive_images.infrastructure.rendering.error_image import render_error_image

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif"})

router = APIRouter(
    tags=["Adaptive Images"],
    responses={
        404: {"description": "Not Found - Source image does not exist (rendered as an image)"},
        500: {"description": "Processing failure (rendered as an image)"},
    },
)


def _send_image(outcome: ImageOutcome) -> FileResponse:
    return FileResponse(
        outcome.path,
        media_type=outcome.content_type,
        headers={
            "Cache-Control": f"private, max-age={outcome.max_age}",
            "Expires": formatdate(time.time() + outcome.max_age, usegmt=True),
        },
    )


def _send_error_image(outcome: ImageOutcome) -> Response:
    return Response(
        content=render_error_image(outcome.error or "Unknown error"),
        media_type="image/jpeg",
        status_code=404 if outcome.not_found else 500,
        headers={"Cache-Control": "no-cache", "Expires": "-1"},
    )


@router.get(
    "/{image_path:path}",
    summary="Adaptive Image",
    description="""
    Serve an image resized for the requesting client.

    The width comes from the resolution cookie when present, otherwise from the
    User-Agent (desktop vs mobile). Resized copies are cached per break-point.
    A mangled cookie is expired on the response.
    """,
    response_class=Response,
    responses={404: {"model": ErrorResponse, "description": "Not an image path"}},
)
def serve_image(
    image_path: str,
    request: Request,
    use_case: ServeAdaptiveImageUseCase = Depends(get_serve_use_case),
):
    """Stream the adaptive variant of ``image_path``."""
    if PurePosixPath(image_path).suffix.lower() not in IMAGE_EXTENSIONS:
        raise HTTPException(status_code=404, detail="Not Found")

    cookie_name = use_case.config.cookie_name
    outcome = use_case.execute(
        image_path,
        preference=request.cookies.get(cookie_name),
        signature=request.headers.get("user-agent"),
    )
    response = _send_image(outcome) if outcome.ok else _send_error_image(outcome)
    if outcome.clear_preference:
        response.delete_cookie(cookie_name)
    return response
