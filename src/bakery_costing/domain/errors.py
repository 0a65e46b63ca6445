"""Errors raised by the cost and nutrition calculators."""

from decimal import Decimal


class InvalidRecipeError(ValueError):
    """Recipe data cannot support the requested computation."""


class MissingPriceError(Exception):
    """One or more contributing ingredient lines have no usable unit price."""

    def __init__(self, material_ids: tuple[int, ...], partial_total: Decimal) -> None:
        self.material_ids = material_ids
        self.partial_total = partial_total
        ids = ", ".join(str(material_id) for material_id in material_ids)
        super().__init__(f"Missing unit price for materials: {ids}")


class NotFoundError(LookupError):
    """A referenced record does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")
