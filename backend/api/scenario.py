"""Scenario API

Validation scenarios exercised end to end: a registration form with an
asynchronous uniqueness check, a two-level nested payload and an array of
products validated element by element.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db, create_entity
from core.errors import raise_result
from core.logging import api_logger
from core.validation import ValidationBoundary, validation_boundary
from models.scenario import DataResponse, ProductArrayRequest, RegisterRequest, TwoLevelsRequest
from models.user import User

router = APIRouter()
log = api_logger()


@router.post("/register", response_model=DataResponse[dict[str, Any]])
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    boundary: ValidationBoundary = Depends(validation_boundary),
):
    """Validate a registration form and create the account."""
    cleaned = request.model_copy(
        update={"phone_number": request.phone_number.strip() if request.phone_number is not None else None}
    )
    await boundary.validate(cleaned, db=db)

    result = await create_entity(db, User(
        email=cleaned.email,
        first_name=cleaned.first_name,
        last_name=cleaned.last_name,
        age=cleaned.age,
        phone_number=cleaned.phone_number,
    ))
    raise_result(result)
    log.info("user_registered", user_id=result.unwrap().id)

    return DataResponse(
        data={
            "email": cleaned.email,
            "firstName": cleaned.first_name,
            "lastName": cleaned.last_name,
            "age": cleaned.age,
            "phoneNumber": cleaned.phone_number,
        },
        message=f"Registration successful! Welcome {cleaned.first_name} {cleaned.last_name}",
    )


@router.post("/nested-two-levels", response_model=DataResponse[dict[str, Any]])
async def nested_two_levels(
    request: TwoLevelsRequest,
    boundary: ValidationBoundary = Depends(validation_boundary),
):
    """Validate a payload nested two levels deep and echo part of it back."""
    await boundary.validate(request)

    return DataResponse(
        data={"orderId": request.order.id, "customerCity": request.customer.address.city},
        message="Nested two-levels payload validated successfully",
    )


@router.post("/products-array", response_model=DataResponse[dict[str, Any]])
async def products_array(
    request: ProductArrayRequest,
    boundary: ValidationBoundary = Depends(validation_boundary),
):
    """Validate every product of the array and summarize the inventory."""
    await boundary.validate(request)

    products = request.products or []
    return DataResponse(
        data={
            "productCount": len(products),
            "totalInventoryValue": sum((p.price or 0.0) * (p.quantity or 0) for p in products),
            "products": [
                {"name": p.name, "category": p.category, "price": p.price, "quantity": p.quantity}
                for p in products
            ],
        },
        message="Products array validated successfully",
    )
