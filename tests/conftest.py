"""
Pytest configuration and fixtures for the PDF accessibility backend tests.

The headless browser, mammoth and the PDF Services SDK are replaced by
in-memory doubles that record every call.
"""

import os

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
os.environ["ADOBE_CLIENT_ID"] = "test-client-id"
os.environ["ADOBE_CLIENT_SECRET"] = "test-client-secret"
os.environ.pop("PDF_A11Y_CONFIG", None)

from pdf_a11y_backend import pdf_services_client
from pdf_a11y_backend.delivery import ReportStore
from pdf_a11y_backend.main import app, get_pipeline
from pdf_a11y_backend.normalizer import DocumentNormalizer
from pdf_a11y_backend.pdf_services_client import AccessibilityServiceClient
from pdf_a11y_backend.pipeline import AccessibilityPipeline

# Minimal PDF that is technically valid
SAMPLE_PDF = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>
endobj
xref
0 4
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
trailer
<< /Size 4 /Root 1 0 R >>
startxref
196
%%EOF"""

SAMPLE_DOCX = b"PK\x03\x04word/document.xml fake docx payload"
RENDERED_PDF = b"%PDF-1.7 rendered from html"
CONVERTED_HTML = "<h1>Quarterly report</h1><p>Converted body</p>"
REPORT_JSON = b'{"Summary": {"Passed": 28, "Failed": 2}, "Detailed Report": {}}'
TAGGED_PDF = b"%PDF-1.7 tagged output"

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class FakeSdkError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class FakeCloudAsset:
    def __init__(self, name):
        self.name = name


class FakeStreamAsset:
    def __init__(self, content):
        self._content = content

    def get_input_stream(self):
        return self._content


class FakeResult:
    def get_report(self):
        return FakeCloudAsset("report")

    def get_tagged_pdf(self):
        return FakeCloudAsset("tagged_pdf")


class FakeResponse:
    def get_result(self):
        return FakeResult()


class FakePDFServices:
    """Stands in for adobe.pdfservices PDFServices, failing on demand at one step."""

    def __init__(self):
        self.calls = []
        self.uploaded = []
        self.streams = []
        self.jobs = []
        self.result_types = []
        self.fail_on = None
        self.contents = {"report": REPORT_JSON, "tagged_pdf": TAGGED_PDF}

    def _record(self, step):
        self.calls.append(step)
        if self.fail_on == step:
            raise FakeSdkError(f"{step} exploded", status_code=503)

    def upload(self, input_stream, mime_type):
        self._record("upload")
        self.streams.append(input_stream)
        self.uploaded.append(input_stream.read() if hasattr(input_stream, "read") else input_stream)
        return FakeCloudAsset("input")

    def submit(self, job):
        self._record("submit")
        self.jobs.append(job)
        return "https://pdf-services.example/jobs/42/status"

    def get_job_result(self, location, result_type):
        self._record("poll")
        self.result_types.append(result_type)
        return FakeResponse()

    def get_content(self, asset):
        self._record("fetch")
        return FakeStreamAsset(self.contents[asset.name])


class FakeCheckerJob:
    def __init__(self, input_asset):
        self.input_asset = input_asset


class FakeAutotagParams:
    def __init__(self, **kwargs):
        self.options = kwargs


class FakeAutotagJob:
    def __init__(self, input_asset, autotag_pdf_params):
        self.input_asset = input_asset
        self.params = autotag_pdf_params


class FakeHtmlConverter:
    def __init__(self):
        self.calls = []

    def convert(self, content):
        self.calls.append(content)
        return CONVERTED_HTML


class FakePdfRenderer:
    def __init__(self):
        self.calls = []
        self.error = None

    def render(self, html, page_format):
        self.calls.append((html, page_format))
        if self.error is not None:
            raise self.error
        return RENDERED_PDF


@pytest.fixture(autouse=True)
def fake_jobs(monkeypatch):
    """Replace SDK job constructors so fake assets are accepted."""
    monkeypatch.setattr(pdf_services_client, "PDFAccessibilityCheckerJob", FakeCheckerJob)
    monkeypatch.setattr(pdf_services_client, "AutotagPDFJob", FakeAutotagJob)
    monkeypatch.setattr(pdf_services_client, "AutotagPDFParams", FakeAutotagParams)


@pytest.fixture
def fake_services():
    return FakePDFServices()


@pytest.fixture
def html_converter():
    return FakeHtmlConverter()


@pytest.fixture
def pdf_renderer():
    return FakePdfRenderer()


@pytest.fixture
def reports_dir(tmp_path):
    return tmp_path / "reports"


@pytest.fixture
def test_pipeline(fake_services, html_converter, pdf_renderer, reports_dir):
    return AccessibilityPipeline(
        normalizer=DocumentNormalizer(html_converter=html_converter, pdf_renderer=pdf_renderer),
        client=AccessibilityServiceClient(pdf_services=fake_services),
        store=ReportStore(reports_dir),
    )


@pytest.fixture
def client(test_pipeline):
    """Create a test client for the FastAPI app with the fake pipeline wired in."""
    app.dependency_overrides[get_pipeline] = lambda: test_pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()
