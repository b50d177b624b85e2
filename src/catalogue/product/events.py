"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductAdded:
    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price_cents = Integer(required=True)
    count_in_stock = Integer(required=True)
    added_at = DateTime(required=True)


@catalogue.event(part_of="Product")
class ReviewAdded:
    """A customer reviewed a product; carries the recomputed rating summary."""

    __version__ = 1

    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    new_rating = Float(required=True)
    num_reviews = Integer(required=True)
    reviewed_at = DateTime(required=True)
