"""
Client for the Adobe PDF Services accessibility APIs.

A job is four blocking remote calls: upload the PDF as an input asset,
submit the job, wait for the job result, then download each result asset.
Nothing is retried. Every SDK failure is re-raised as RemoteServiceError
naming the step that failed.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, Callable, List, TypeVar

from adobe.pdfservices.operation.auth.service_principal_credentials import ServicePrincipalCredentials
from adobe.pdfservices.operation.io.cloud_asset import CloudAsset
from adobe.pdfservices.operation.io.stream_asset import StreamAsset
from adobe.pdfservices.operation.pdf_services import ClientConfig, PDFServices
from adobe.pdfservices.operation.pdf_services_media_type import PDFServicesMediaType
from adobe.pdfservices.operation.pdfjobs.jobs.autotag_pdf_job import AutotagPDFJob
from adobe.pdfservices.operation.pdfjobs.jobs.pdf_accessibility_checker_job import PDFAccessibilityCheckerJob
from adobe.pdfservices.operation.pdfjobs.params.autotag_pdf.autotag_pdf_params import AutotagPDFParams
from adobe.pdfservices.operation.pdfjobs.result.autotag_pdf_result import AutotagPDFResult
from adobe.pdfservices.operation.pdfjobs.result.pdf_accessibility_checker_result import PDFAccessibilityCheckerResult

from .errors import RemoteServiceError
from .models import AdobeSettings, JobKind, JobOutcome, RemoteJobHandle, ResultAsset

logger = logging.getLogger(__name__)

T = TypeVar("T")

RESULT_TYPES = {
    JobKind.CHECKER: PDFAccessibilityCheckerResult,
    JobKind.AUTOTAG: AutotagPDFResult,
}

# Result accessors fetched per job kind, in download order
RESULT_ASSETS = {
    JobKind.CHECKER: [("report", "get_report")],
    JobKind.AUTOTAG: [("tagged_pdf", "get_tagged_pdf"), ("report", "get_report")],
}


def build_pdf_services(settings: AdobeSettings) -> PDFServices:
    credentials = ServicePrincipalCredentials(
        client_id=settings.client_id,
        client_secret=settings.client_secret,
    )
    client_config = ClientConfig(
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )
    return PDFServices(credentials=credentials, client_config=client_config)


class AccessibilityServiceClient:
    """
    Runs accessibility checker and auto-tag jobs against PDF Services.

    The SDK instance is created lazily from the settings on first use, so
    constructing the client never talks to the network.
    """

    def __init__(self, settings: AdobeSettings | None = None, pdf_services: Any = None) -> None:
        self._settings = settings or AdobeSettings()
        self._pdf_services = pdf_services

    @property
    def pdf_services(self) -> Any:
        if self._pdf_services is None:
            self._pdf_services = build_pdf_services(self._settings)
        return self._pdf_services

    def _call(self, step: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            logger.error(f"PDF Services {step} failed: {exc}")
            raise RemoteServiceError(f"PDF Services {step} failed: {exc}", step=step, status_code=status_code) from exc

    def upload(self, input_stream: BinaryIO | bytes) -> CloudAsset:
        return self._call(
            "upload",
            lambda: self.pdf_services.upload(input_stream=input_stream, mime_type=PDFServicesMediaType.PDF),
        )

    def submit(self, input_asset: CloudAsset, kind: JobKind) -> RemoteJobHandle:
        def _submit() -> str:
            if kind is JobKind.AUTOTAG:
                params = AutotagPDFParams(generate_report=True, shift_headings=True)
                job = AutotagPDFJob(input_asset=input_asset, autotag_pdf_params=params)
            else:
                job = PDFAccessibilityCheckerJob(input_asset=input_asset)
            return self.pdf_services.submit(job)

        location = self._call("submit", _submit)
        logger.info(f"Submitted {kind.value} job")
        return RemoteJobHandle(location=location, kind=kind)

    def wait_for_result(self, handle: RemoteJobHandle) -> Any:
        response = self._call(
            "poll",
            lambda: self.pdf_services.get_job_result(handle.location, RESULT_TYPES[handle.kind]),
        )
        return response.get_result()

    def fetch_assets(self, result: Any, kind: JobKind) -> List[ResultAsset]:
        assets: List[ResultAsset] = []
        for name, accessor in RESULT_ASSETS[kind]:

            def _fetch() -> bytes:
                cloud_asset: CloudAsset = getattr(result, accessor)()
                stream_asset: StreamAsset = self.pdf_services.get_content(cloud_asset)
                return stream_asset.get_input_stream()

            assets.append(ResultAsset(name=name, content=self._call("fetch", _fetch)))
        return assets

    def run(self, input_stream: BinaryIO | bytes, kind: JobKind = JobKind.CHECKER) -> JobOutcome:
        input_asset = self.upload(input_stream)
        handle = self.submit(input_asset, kind)
        result = self.wait_for_result(handle)
        assets = self.fetch_assets(result, kind)
        logger.info(f"{kind.value} job finished with {len(assets)} result asset(s)")
        return JobOutcome(kind=kind, handle=handle, assets=assets)
