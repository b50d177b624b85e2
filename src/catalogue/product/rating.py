"""Review aggregation: a product's rating summary derived from its reviews."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RatingSummary:
    rating: float
    num_reviews: int


def recompute(product) -> RatingSummary:
    """Mean of all review ratings, 0 when there are none. Unrounded."""
    ratings = [review.rating for review in product.reviews]
    if not ratings:
        return RatingSummary(rating=0.0, num_reviews=0)
    return RatingSummary(rating=sum(ratings) / len(ratings), num_reviews=len(ratings))
