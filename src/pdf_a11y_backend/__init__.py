"""
PDF Accessibility Backend - REST API in front of Adobe PDF Services

This package provides a FastAPI-based web service that forwards uploaded
documents to the Adobe PDF Services accessibility checker and returns the
resulting report. It enables:

- Single-file uploads over multipart HTTP
- Word (.docx) to PDF conversion before submission (mammoth + Playwright)
- Accessibility checker and auto-tag jobs against PDF Services
- Timestamped report persistence and file download

The backend is a thin orchestration layer: document analysis, rule
evaluation and tagging all run inside the remote service.

Key Components:
    - main: FastAPI application and HTTP endpoint definitions
    - pipeline: Receive, normalize, submit, deliver
    - normalizer: Word-to-PDF conversion and pass-through
    - pdf_services_client: PDF Services upload/submit/poll/fetch
    - delivery: Report files and script-mode outputs
    - configuration: Config loading and merging logic
    - cli: Script variant and server launcher

Usage:
    Run the API server with:
        uvicorn pdf_a11y_backend.main:app --reload --host 0.0.0.0 --port 3000

    Or use the CLI:
        pdf-a11y serve
        pdf-a11y autotag
"""
