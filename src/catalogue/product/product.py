"""Product aggregate root with its embedded Review entities.

Reviews live inside the Product so that the one-review-per-user rule and
the rating summary change in the same aggregate mutation: a review is never
visible without the rating that includes it.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from catalogue.domain import catalogue
from catalogue.product.events import ProductAdded, ReviewAdded
from catalogue.product.rating import recompute
from shared.errors import DuplicateReview, InvalidRating

MIN_RATING = 1
MAX_RATING = 5


@catalogue.entity(part_of="Product")
class Review:
    user_id: Identifier(required=True)
    name: String(required=True, max_length=100)
    rating: Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment: Text()
    created_at: DateTime()


@catalogue.aggregate
class Product:
    name: String(required=True, max_length=255)
    price_cents: Integer(required=True, min_value=0)
    image: String(max_length=500)
    count_in_stock: Integer(default=0, min_value=0)
    rating: Float(default=0.0)
    num_reviews: Integer(default=0)
    reviews: HasMany(Review)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def one_review_per_user(self):
        user_ids = [str(review.user_id) for review in self.reviews]
        if len(user_ids) != len(set(user_ids)):
            raise ValidationError({"reviews": ["A user can review a product only once"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def add(cls, name, price_cents, image=None, count_in_stock=0):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price_cents=price_cents,
            image=image,
            count_in_stock=count_in_stock,
            rating=0.0,
            num_reviews=0,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                price_cents=price_cents,
                count_in_stock=count_in_stock,
                added_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def has_review_from(self, user_id) -> bool:
        return any(str(review.user_id) == str(user_id) for review in self.reviews)

    def add_review(self, user_id, name, rating, comment=None):
        """Append a review and recompute the rating summary in one change."""
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidRating(f"Rating must be a whole number from {MIN_RATING} to {MAX_RATING}")
        if self.has_review_from(user_id):
            raise DuplicateReview("Product already reviewed")

        now = datetime.now(UTC)
        review = Review(
            user_id=user_id,
            name=name,
            rating=rating,
            comment=comment,
            created_at=now,
        )

        with atomic_change(self):
            self.add_reviews(review)
            summary = recompute(self)
            self.rating = summary.rating
            self.num_reviews = summary.num_reviews
            self.updated_at = now

        self.raise_(
            ReviewAdded(
                product_id=str(self.id),
                review_id=str(review.id),
                user_id=str(user_id),
                rating=rating,
                new_rating=self.rating,
                num_reviews=self.num_reviews,
                reviewed_at=now,
            )
        )
        return review
