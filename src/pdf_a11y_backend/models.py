from __future__ import annotations

import io
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

PDF_MEDIA_TYPE = "application/pdf"


class JobKind(str, Enum):
    CHECKER = "accessibility-checker"
    AUTOTAG = "autotag"


@dataclass
class UploadedFile:
    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ConversionResult:
    """PDF bytes ready for submission, either passed through or rendered from Word."""

    content: bytes
    source_filename: str
    converted: bool = False
    media_type: str = PDF_MEDIA_TYPE

    def open_stream(self) -> io.BytesIO:
        return io.BytesIO(self.content)


@dataclass(frozen=True)
class RemoteJobHandle:
    location: str
    kind: JobKind


@dataclass(frozen=True)
class ResultAsset:
    name: str
    content: bytes


@dataclass
class JobOutcome:
    kind: JobKind
    handle: RemoteJobHandle
    assets: List[ResultAsset] = field(default_factory=list)

    def get_asset(self, name: str) -> Optional[ResultAsset]:
        return next((asset for asset in self.assets if asset.name == name), None)

    @property
    def report(self) -> Optional[ResultAsset]:
        return self.get_asset("report")

    @property
    def tagged_pdf(self) -> Optional[ResultAsset]:
        return self.get_asset("tagged_pdf")


@dataclass(frozen=True)
class DeliveredReport:
    path: Path
    content: bytes


class AdobeSettings(BaseModel):
    client_id: str = ""
    client_secret: str = ""
    connect_timeout: int = 8000
    read_timeout: int = 40000


class CorsSettings(BaseModel):
    origin: str = "http://localhost:4200"
    methods: List[str] = ["GET", "POST", "OPTIONS"]
    headers: List[str] = ["Content-Type"]


class ConversionSettings(BaseModel):
    page_format: str = "A4"
    validate_pdf_header: bool = False


class ReportSettings(BaseModel):
    directory: str = "reports"
    suffix: str = "accessibility-report.json"
    download_name: str = "accessibility-report.json"


class ScriptSettings(BaseModel):
    input_path: str = "./Adobe_Accessibility_Auto_Tag_API_Sample.pdf"
    tagged_pdf_path: str = "./autotag-tagged.pdf"
    report_path: str = "./autotag-report.xlsx"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000


class Settings(BaseModel):
    log_level: str = "INFO"
    adobe: AdobeSettings = AdobeSettings()
    cors: CorsSettings = CorsSettings()
    conversion: ConversionSettings = ConversionSettings()
    reports: ReportSettings = ReportSettings()
    script: ScriptSettings = ScriptSettings()
    server: ServerSettings = ServerSettings()
