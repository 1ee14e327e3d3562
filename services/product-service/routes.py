from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from exceptions import ProductNotFoundError
from repository import ProductRepository
from schemas import (
    MessageResponse,
    NotFoundResponse,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    ValidationErrorResponse,
)
from validation import (
    CREATE_PRODUCT_RULES,
    ID_RULES,
    UPDATE_PRODUCT_RULES,
    ValidatedRequest,
    validate_request,
)

router = APIRouter(prefix="/api/products", tags=["products"])

INVALID_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse}}
NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": NotFoundResponse}}


def json_body(schema) -> dict:
    """Describe a request body read by the validation chain rather than by FastAPI."""
    return {
        "requestBody": {
            "content": {"application/json": {"schema": schema.model_json_schema()}},
            "required": True,
        }
    }


def get_repository(db: AsyncSession = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


@router.get("", response_model=ProductListResponse)
async def list_products(repo: ProductRepository = Depends(get_repository)) -> ProductListResponse:
    """List all products, highest id first."""
    return ProductListResponse(data=await repo.list_products())


@router.get("/{id}", response_model=ProductResponse, responses={**INVALID_REQUEST, **NOT_FOUND})
async def get_product(
    checked: ValidatedRequest = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> ProductResponse:
    """Get a single product."""
    product = await repo.get_product(checked.product_id)
    if product is None:
        raise ProductNotFoundError(checked.product_id)
    return ProductResponse(data=product)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=INVALID_REQUEST,
    openapi_extra=json_body(ProductCreate),
)
async def create_product(
    checked: ValidatedRequest = Depends(validate_request(CREATE_PRODUCT_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> ProductResponse:
    """Create a product. Availability defaults to true."""
    body = checked.body
    data = ProductCreate(
        name=body["name"],
        price=float(body["price"]),
        availability=body["availability"] if isinstance(body.get("availability"), bool) else True,
    )
    return ProductResponse(data=await repo.create_product(data))


@router.put(
    "/{id}",
    response_model=ProductResponse,
    responses={**INVALID_REQUEST, **NOT_FOUND},
    openapi_extra=json_body(ProductUpdate),
)
async def update_product(
    checked: ValidatedRequest = Depends(validate_request(UPDATE_PRODUCT_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> ProductResponse:
    """Replace name, price and availability of an existing product."""
    body = checked.body
    data = ProductUpdate(name=body["name"], price=float(body["price"]), availability=body["availability"])
    product = await repo.replace_product(checked.product_id, data)
    if product is None:
        raise ProductNotFoundError(checked.product_id)
    return ProductResponse(data=product)


@router.patch("/{id}", response_model=ProductResponse, responses={**INVALID_REQUEST, **NOT_FOUND})
async def update_availability(
    checked: ValidatedRequest = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> ProductResponse:
    """Toggle availability. The request body is ignored."""
    product = await repo.toggle_availability(checked.product_id)
    if product is None:
        raise ProductNotFoundError(checked.product_id)
    return ProductResponse(data=product)


@router.delete("/{id}", response_model=MessageResponse, responses={**INVALID_REQUEST, **NOT_FOUND})
async def delete_product(
    checked: ValidatedRequest = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_repository),
) -> MessageResponse:
    """Delete a product permanently."""
    if not await repo.delete_product(checked.product_id):
        raise ProductNotFoundError(checked.product_id)
    return MessageResponse(data="product deleted successfully")
