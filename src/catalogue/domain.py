"""Catalogue bounded context — Products and their Reviews.

Owns the products customers buy and the reviews they leave. A product's
rating summary is recomputed from its reviews whenever a review is added.
"""

from protean.domain import Domain

catalogue = Domain(name="catalogue")
