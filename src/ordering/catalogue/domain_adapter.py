"""Catalogue lookup backed by the Catalogue domain's Product aggregate."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.catalogue.port import CatalogueLookup, ProductSnapshot
from ordering.pricing import from_minor_units


class CatalogueDomainLookup(CatalogueLookup):
    """Reads products inside the catalogue domain's own context."""

    def __init__(self, domain) -> None:
        self.domain = domain

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        from catalogue.product.product import Product

        with self.domain.domain_context():
            try:
                product = current_domain.repository_for(Product).get(str(product_id))
            except ObjectNotFoundError:
                return None

            return ProductSnapshot(
                product_id=str(product.id),
                name=product.name,
                price=from_minor_units(product.price_cents),
                image=product.image or "",
                count_in_stock=product.count_in_stock,
            )
