from __future__ import annotations


class AnalysisError(RuntimeError):
    """Base class for failures that end an analysis request."""

    code = "analysis_failed"
    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class InvalidRequest(AnalysisError):
    code = "invalid_request"
    status_code = 400


class ExtractionFailed(AnalysisError):
    code = "extraction_failed"


class UnsupportedFormat(ExtractionFailed):
    code = "unsupported_format"

    def __init__(self, media_type: str):
        super().__init__(f"Unsupported file type: {media_type}")
        self.media_type = media_type


class CompletionFailed(AnalysisError):
    code = "completion_failed"


class MalformedModelOutput(AnalysisError):
    code = "malformed_model_output"

    def __init__(self, message: str, *, raw_reply: str = ""):
        super().__init__(message)
        self.raw_reply = raw_reply


class StorageFailed(AnalysisError):
    """Raised by the result store; never surfaced to API callers."""

    code = "storage_failed"
