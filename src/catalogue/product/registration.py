"""Product registration — command and handler.

Products are managed by the catalogue collaborator; this entry point exists
so that the storefront can be seeded with purchasable products.
"""

from protean import handle
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    price_cents: Integer(required=True, min_value=0)
    image: String(max_length=500)
    count_in_stock: Integer(default=0, min_value=0)


@catalogue.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            price_cents=command.price_cents,
            image=command.image,
            count_in_stock=command.count_in_stock or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
