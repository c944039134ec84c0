"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the chat domain apps.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling
    - ErrorKind: Failure taxonomy (not found, access denied, ...)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - StorageUnavailableError: Storage kept failing after retries

Decorators (import from core.decorators):
    - retry_on_transient_db_errors: Bounded retry for storage calls
    - log_request: Request/response logging decorator

Views (import from core.views):
    - health_check: Liveness/readiness probe
    - failure_response: ServiceResult -> HTTP response
"""
