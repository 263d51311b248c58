"""
Error types raised by the processing pipeline.

Each stage of the pipeline raises its own exception type so the HTTP layer
(and any other caller) can tell a conversion failure from a remote-service
failure or a local filesystem failure. All of them derive from
AccessibilityServiceError and carry the name of the stage that failed.
"""

from __future__ import annotations

from typing import Optional


class AccessibilityServiceError(Exception):
    """Base exception for all pipeline errors."""

    stage = "pipeline"

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class UnsupportedDocumentError(AccessibilityServiceError):
    """Raised when an upload is rejected before any processing happens."""

    stage = "receive"


class NormalizationError(AccessibilityServiceError):
    """Raised when a Word document cannot be converted to PDF."""

    stage = "normalization"


class RemoteServiceError(AccessibilityServiceError):
    """
    Raised when any call to the PDF Services API fails.

    Attributes:
        step: Which remote step failed (upload, submit, poll or fetch)
        status_code: HTTP status reported by the service, when the SDK exposes one
    """

    def __init__(self, message: str, *, step: str, status_code: Optional[int] = None) -> None:
        super().__init__(message, stage=f"remote:{step}")
        self.step = step
        self.status_code = status_code


class ReportStorageError(AccessibilityServiceError):
    """Raised when a report cannot be written to local disk."""

    stage = "storage"
