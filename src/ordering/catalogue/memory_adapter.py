"""In-memory catalogue for development and testing."""

from ordering.catalogue.port import CatalogueLookup, ProductSnapshot


class InMemoryCatalogue(CatalogueLookup):
    def __init__(self, products: list[ProductSnapshot] | None = None) -> None:
        self.products: dict[str, ProductSnapshot] = {}
        for product in products or []:
            self.put(product)

    def put(self, product: ProductSnapshot) -> None:
        self.products[str(product.product_id)] = product

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        return self.products.get(str(product_id))
