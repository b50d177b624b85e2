"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Airpods Wireless Bluetooth Headphones",
                    "price": "89.99",
                    "image": "/images/airpods.jpg",
                    "count_in_stock": 10,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    image: str | None = Field(None, max_length=500)
    count_in_stock: int = Field(0, ge=0)


# --- Review Request Schemas ---


class AddReviewRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "rating": 5,
                    "comment": "Great sound, battery lasts all day.",
                }
            ]
        }
    }

    rating: int
    comment: str | None = None


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class ReviewIdResponse(BaseModel):
    review_id: str


class RatingResponse(BaseModel):
    product_id: str
    rating: float
    num_reviews: int
