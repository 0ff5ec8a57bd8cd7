"""
Custom Exception Classes for Job Match API
"""
from typing import Dict, Any
from fastapi import HTTPException


class JobMatchBaseException(Exception):
    """Base exception for Job Match API"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(JobMatchBaseException):
    """Raised when request data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class UnsupportedFileType(JobMatchBaseException):
    """Raised when an uploaded resume is not pdf, doc or docx"""

    def __init__(self, message: str = "Unsupported file type", file_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if file_type is not None:
            details['file_type'] = file_type
        super().__init__(message, error_code="UNSUPPORTED_FILE_TYPE", details=details, **kwargs)


class ExtractionFailure(JobMatchBaseException):
    """Raised when the text of an uploaded resume cannot be read or decoded"""

    def __init__(self, message: str = "Failed to extract text from resume", file_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if file_type:
            details['file_type'] = file_type
        super().__init__(message, error_code="EXTRACTION_FAILURE", details=details, **kwargs)


class ResumeNotFound(JobMatchBaseException):
    """Raised when a candidate has no stored resume parse"""

    def __init__(self, message: str = "No parsed resume found. Please upload your resume first.", owner_id: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if owner_id:
            details['owner_id'] = owner_id
        super().__init__(message, error_code="RESUME_NOT_FOUND", details=details, **kwargs)


class JobNotFound(JobMatchBaseException):
    """Raised when a job id does not resolve to a posting"""

    def __init__(self, message: str = "Job not found", job_id: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if job_id:
            details['job_id'] = job_id
        super().__init__(message, error_code="JOB_NOT_FOUND", details=details, **kwargs)


class AuthenticationError(JobMatchBaseException):
    """Raised when the caller identity is missing"""

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


class NotAuthorized(JobMatchBaseException):
    """Raised when a role or ownership check fails"""

    def __init__(self, message: str = "Not authorized", resource: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if resource:
            details['resource'] = resource
        super().__init__(message, error_code="NOT_AUTHORIZED", details=details, **kwargs)


class PersistenceFailure(JobMatchBaseException):
    """Raised when the store is unreachable or rejects a write"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="PERSISTENCE_FAILURE", details=details, **kwargs)


# HTTP Exception Mapping
STATUS_CODE_MAPPING = {
    ValidationError: 400,
    UnsupportedFileType: 400,
    AuthenticationError: 401,
    NotAuthorized: 403,
    ResumeNotFound: 404,
    JobNotFound: 404,
    ExtractionFailure: 500,
    PersistenceFailure: 500,
}


def map_to_http_exception(exc: JobMatchBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code = STATUS_CODE_MAPPING.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager that logs an operation and wraps store errors as PersistenceFailure"""

    def __init__(self, operation: str, logger=None, collection: str = None, **context):
        self.operation = operation
        self.logger = logger
        self.collection = collection
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        # Re-raise custom exceptions as-is
        if isinstance(exc_val, JobMatchBaseException) or not isinstance(exc_val, Exception):
            return False

        raise PersistenceFailure(
            f"Persistence error in {self.operation}: {str(exc_val)}",
            operation=self.operation,
            collection=self.collection,
            details=dict(self.context),
            cause=exc_val
        ) from exc_val
