"""
The request pipeline: receive, normalize, run the remote job, deliver.

Each call is independent and holds no state between requests. Every stage
raises its own AccessibilityServiceError subclass; the intermediate PDF
stream is released whichever stage fails.
"""

from __future__ import annotations

import logging

from .delivery import ReportStore
from .errors import RemoteServiceError
from .models import DeliveredReport, JobKind, JobOutcome, Settings, UploadedFile
from .normalizer import DocumentNormalizer
from .pdf_services_client import AccessibilityServiceClient

logger = logging.getLogger(__name__)


class AccessibilityPipeline:
    def __init__(
        self,
        normalizer: DocumentNormalizer,
        client: AccessibilityServiceClient,
        store: ReportStore,
    ) -> None:
        self.normalizer = normalizer
        self.client = client
        self.store = store

    @classmethod
    def from_settings(cls, settings: Settings) -> "AccessibilityPipeline":
        return cls(
            normalizer=DocumentNormalizer(
                page_format=settings.conversion.page_format,
                validate_pdf_header=settings.conversion.validate_pdf_header,
            ),
            client=AccessibilityServiceClient(settings.adobe),
            store=ReportStore(settings.reports.directory, settings.reports.suffix),
        )

    def _run_job(self, upload: UploadedFile, kind: JobKind) -> JobOutcome:
        logger.info(f"Starting {kind.value} run for {upload.filename}")
        document = self.normalizer.normalize(upload)
        stream = document.open_stream()
        try:
            return self.client.run(stream, kind)
        finally:
            stream.close()

    def check(self, upload: UploadedFile) -> DeliveredReport:
        """
        Run the accessibility checker on an upload and persist the JSON report.

        Raises:
            UnsupportedDocumentError: If the upload is rejected before processing
            NormalizationError: If Word-to-PDF conversion fails
            RemoteServiceError: If any PDF Services call fails
            ReportStorageError: If the report cannot be written
        """
        outcome = self._run_job(upload, JobKind.CHECKER)
        if outcome.report is None:
            raise RemoteServiceError("Accessibility checker returned no report", step="fetch")
        return self.store.save(outcome.report.content)

    def autotag(self, upload: UploadedFile) -> JobOutcome:
        return self._run_job(upload, JobKind.AUTOTAG)
