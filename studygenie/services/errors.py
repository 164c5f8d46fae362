# services/errors.py
# Exceptions raised by the service layer; routers map them to HTTP responses.


class StudyGenieError(Exception):
    """Base class for every error the service layer raises on purpose."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(StudyGenieError):
    status_code = 500


class NotFoundError(StudyGenieError):
    status_code = 404


class InvalidUploadError(StudyGenieError):
    status_code = 400


class ExtractionError(StudyGenieError):
    status_code = 500


class GenerationError(StudyGenieError):
    status_code = 500


class InvalidRequestError(StudyGenieError):
    status_code = 400


class StorageError(StudyGenieError):
    status_code = 500


class GatewayError(StudyGenieError):
    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status
