"""Product reviews — command and handler.

The duplicate check, the append and the rating recomputation all happen on
the loaded Product and are persisted together in the handler's unit of work.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from shared.errors import NotFound

logger = structlog.get_logger(__name__)

DEFAULT_DISPLAY_NAME = "Customer"


@catalogue.command(part_of="Product")
class AddReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    display_name: String(max_length=100)
    rating: Integer(required=True)
    comment: Text()


@catalogue.command_handler(part_of=Product)
class AddReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError as exc:
            raise NotFound(f"Product {command.product_id} does not exist", field="product_id") from exc

        review = product.add_review(
            user_id=command.user_id,
            name=command.display_name or DEFAULT_DISPLAY_NAME,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(product)

        logger.info(
            "review_added",
            product_id=str(product.id),
            user_id=str(command.user_id),
            rating=product.rating,
            num_reviews=product.num_reviews,
        )
        return str(review.id)
