import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"


class ProductServiceError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def body(self) -> Dict[str, Any]:
        return {"error": str(self)}


class RequestValidationFailed(ProductServiceError):
    """One or more validation rules rejected the request."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors

    def body(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class ProductNotFoundError(ProductServiceError):
    """No product row has the requested id."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id: int):
        super().__init__(PRODUCT_NOT_FOUND)
        self.product_id = product_id

    def body(self) -> Dict[str, Any]:
        return {"error": PRODUCT_NOT_FOUND}


async def product_service_error_handler(request: Request, exc: ProductServiceError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.body())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProductServiceError, product_service_error_handler)
