"""Pydantic request/response schemas for the Payments API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreatePaymentIntentRequest(BaseModel):
    order_id: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_id": "8c1f3f3e-2c55-4b8a-9d8e-0f6f0a4b7c21",
                }
            ]
        }
    }


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaymentIntentResponse(BaseModel):
    intent_id: str
    client_secret: str
    amount: int
    currency: str


class PublicConfigResponse(BaseModel):
    publishable_key: str


class WebhookResponse(BaseModel):
    status: str
    order_id: str | None = None
