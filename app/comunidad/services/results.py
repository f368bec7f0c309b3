from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from app.comunidad.core.error_catalog import AppError, ErrorCatalog
from app.comunidad.core.metrics import metrics

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceError:
    name: str
    message: str
    code: str
    details: Any = None


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    success: bool
    data: T | None = None
    error: ServiceError | None = None

    @classmethod
    def ok(cls, data: T) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ServiceError) -> "ServiceResult[T]":
        return cls(success=False, error=error)


def not_found(entity: str, entity_id: Any) -> ServiceError:
    return ServiceError(
        name="NotFoundError",
        message=f"{entity} {entity_id} not found",
        code="NOT_FOUND",
        details={"entity": entity, "id": str(entity_id)},
    )


def conflict(code: str, message: str, entity: str, entity_id: Any) -> ServiceError:
    return ServiceError(name="ConflictError", message=message, code=code, details={"entity": entity, "id": str(entity_id)})


def from_exception(exc: Exception, operation: str) -> ServiceError:
    return ServiceError(
        name=exc.__class__.__name__,
        message=f"{operation} failed",
        code="SERVICE_ERROR",
        details={"operation": operation},
    )


def invalid_field(entity: str, field: str) -> ServiceError:
    return ServiceError(
        name="QueryError",
        message=f"{entity} has no field {field}",
        code="INVALID_FIELD",
        details={"entity": entity, "field": field},
    )


_ERROR_DEFINITIONS = {
    "NOT_FOUND": ErrorCatalog.ENTITY_NOT_FOUND,
    "ALREADY_DELETED": ErrorCatalog.ALREADY_DELETED,
    "NOT_DELETED": ErrorCatalog.NOT_DELETED,
    "INVALID_STATE": ErrorCatalog.INVALID_STATE,
    "INVALID_FIELD": ErrorCatalog.VALIDATION_ERROR,
}


def unwrap(result: ServiceResult[T]) -> T:
    """Return the result data or raise the matching :class:`AppError`."""
    if result.success:
        return result.data
    error = result.error
    definition = _ERROR_DEFINITIONS.get(error.code, ErrorCatalog.SERVICE_ERROR)
    if definition is ErrorCatalog.SERVICE_ERROR:
        metrics.increment_service_error(error.code)
    raise AppError(definition, details={"name": error.name, "message": error.message, **(error.details or {})})
