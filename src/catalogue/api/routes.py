"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    AddProductRequest,
    AddReviewRequest,
    ProductIdResponse,
    RatingResponse,
    ReviewIdResponse,
)
from catalogue.product.product import Product
from catalogue.product.registration import AddProduct
from catalogue.product.reviewing import AddReview
from ordering.pricing import to_minor_units
from shared.api import current_actor
from shared.errors import Forbidden
from shared.identity import Actor

product_router = APIRouter(prefix="/products", tags=["products"])


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest, actor: Actor = Depends(current_actor)) -> ProductIdResponse:
    if not actor.is_admin:
        raise Forbidden("Only admins can add products")

    command = AddProduct(
        name=body.name,
        price_cents=to_minor_units(body.price),
        image=body.image,
        count_in_stock=body.count_in_stock,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@product_router.get("/{product_id}/rating", response_model=RatingResponse)
async def product_rating(product_id: str) -> RatingResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return RatingResponse(
        product_id=str(product.id),
        rating=product.rating,
        num_reviews=product.num_reviews,
    )


# --- Review endpoints ---


@product_router.post("/{product_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def add_review(
    product_id: str,
    body: AddReviewRequest,
    actor: Actor = Depends(current_actor),
) -> ReviewIdResponse:
    command = AddReview(
        product_id=product_id,
        user_id=actor.user_id,
        display_name=actor.name,
        rating=body.rating,
        comment=body.comment,
    )
    review_id = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=review_id)
