"""Customization exceptions."""


class CustomizationError(Exception):
    """Base exception for customization and pricing errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SchemaDefinitionError(CustomizationError):
    """A schema definition violates its type's constraints.

    Raised before anything is persisted; the stored schema is unchanged.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "Invalid schema definition")
        self.errors = errors


class ProtectedSchemaError(CustomizationError):
    """Base schemas cannot be deleted."""


class SchemaInUseError(CustomizationError):
    """Schema is still attached to one or more menu items."""

    def __init__(self, message: str, item_ids: list[str] | None = None) -> None:
        super().__init__(message)
        self.item_ids = item_ids or []


class UnknownSchemaError(CustomizationError):
    """One or more schema ids do not exist for this restaurant."""

    def __init__(self, message: str, schema_ids: list[str] | None = None) -> None:
        super().__init__(message)
        self.schema_ids = schema_ids or []


class CatalogItemNotFoundError(CustomizationError):
    """The item being priced is not in the catalog."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Menu item {item_id} not found")
        self.item_id = item_id
