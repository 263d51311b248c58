from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import Depends, FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.types import Receive, Scope, Send

from .configuration import load_settings
from .errors import AccessibilityServiceError, UnsupportedDocumentError
from .models import UploadedFile
from .pipeline import AccessibilityPipeline
from .utils import configure_logging, hex_preview

logger = logging.getLogger(__name__)

settings = load_settings()
configure_logging(settings.log_level)

app = FastAPI(title="PDF Accessibility API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors.origin],
    allow_methods=settings.cors.methods,
    allow_headers=settings.cors.headers,
)

pipeline = AccessibilityPipeline.from_settings(settings)


def get_pipeline() -> AccessibilityPipeline:
    return pipeline


class ReportDownloadResponse(FileResponse):
    """File download whose send errors are logged instead of propagated."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except (OSError, RuntimeError) as exc:
            logger.error(f"Error sending file {self.path}: {exc}")


@app.get("/healthz")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/upload-pdf")
async def upload_pdf(
    file: Optional[UploadFile] = File(None),
    runner: AccessibilityPipeline = Depends(get_pipeline),
) -> Response:
    if file is None:
        return PlainTextResponse("No file uploaded", status_code=400)

    content = await file.read()
    await file.close()
    upload = UploadedFile(
        content=content,
        filename=file.filename or "",
        content_type=file.content_type or "",
    )

    logger.info(f"File name: {upload.filename}")
    logger.info(f"File size (bytes): {upload.size}")
    logger.info(f"File mimetype: {upload.content_type}")
    logger.info(f"First 100 bytes (hex): {hex_preview(upload.content)}")

    try:
        report = await run_in_threadpool(runner.check, upload)
    except UnsupportedDocumentError as exc:
        return PlainTextResponse(str(exc), status_code=400)
    except AccessibilityServiceError as exc:
        logger.exception(f"Error processing PDF ({exc.stage})")
        return PlainTextResponse(
            "Error processing PDF",
            status_code=500,
            headers={"X-Processing-Stage": exc.stage},
        )
    except Exception:  # noqa: BLE001
        logger.exception("Error processing PDF")
        return PlainTextResponse(
            "Error processing PDF",
            status_code=500,
            headers={"X-Processing-Stage": AccessibilityServiceError.stage},
        )

    return ReportDownloadResponse(
        report.path,
        media_type="application/json",
        filename=settings.reports.download_name,
    )
