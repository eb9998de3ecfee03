"""
Selection validator - gates add-to-cart on structural completeness.

Every schema is checked so the customer sees every problem at once, but
only the first violated rule of each schema is reported.
"""

from collections.abc import Sequence
from typing import Any

from pizzeria_schemas import (
    OPTION_KEY,
    SIZE_KEY,
    AdditionalToppingsSchema,
    CatalogItem,
    HalfAndHalfSchema,
    OrderMode,
    SchemaSelection,
    SelectionError,
    SelectionErrorKind,
    SelectionState,
    SingleChoiceOptionsSchema,
    SizeSelectionSchema,
)

from apps.web.customization.engine.pricing import CatalogLookup
from apps.web.customization.engine.selection import (
    as_id_list,
    selected_toppings,
    selected_value,
)


def _error(schema: Any, kind: SelectionErrorKind, message: str) -> SelectionError:
    return SelectionError(kind=kind, schema_id=schema.id, message=message)


def _label(schema: Any) -> str:
    return f"'{schema.name}'" if schema.name else "this option"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _check_size(
    schema: SizeSelectionSchema, selection: SchemaSelection
) -> SelectionError | None:
    if schema.is_required and not selected_value(selection, SIZE_KEY):
        return _error(
            schema,
            SelectionErrorKind.MISSING_REQUIRED_SELECTION,
            "Please select size",
        )
    return None


def _check_half_and_half(
    schema: HalfAndHalfSchema,
    selection: SchemaSelection,
    item: CatalogItem,
    catalog_lookup: CatalogLookup | None,
) -> SelectionError | None:
    if schema.is_required and selection.order_mode == OrderMode.WHOLE:
        return _error(
            schema,
            SelectionErrorKind.MISSING_REQUIRED_SELECTION,
            "Please select an option",
        )
    if selection.order_mode == OrderMode.HALF_AND_HALF:
        if not selection.second_item_id:
            return _error(
                schema,
                SelectionErrorKind.MISSING_SECOND_FLAVOR,
                "Please select second flavor",
            )
        if selection.second_item_id == item.id:
            return _error(
                schema,
                SelectionErrorKind.SELF_COMBINATION_NOT_ALLOWED,
                "Cannot select same flavor for both halves",
            )
        if catalog_lookup is not None:
            return _check_second_flavor(
                schema, selection.second_item_id, item, catalog_lookup
            )
    return None


def _check_second_flavor(
    schema: HalfAndHalfSchema,
    second_item_id: str,
    item: CatalogItem,
    catalog_lookup: CatalogLookup,
) -> SelectionError | None:
    """The second half must be an available item of an allowed category."""
    second = catalog_lookup(second_item_id)
    if second is None or not second.is_available:
        return _error(
            schema,
            SelectionErrorKind.INVALID_SECOND_FLAVOR,
            "The selected second flavor is not available",
        )
    allowed = schema.config.allowed_categories or (
        [item.category_id] if item.category_id else []
    )
    if allowed and second.category_id not in allowed:
        return _error(
            schema,
            SelectionErrorKind.INVALID_SECOND_FLAVOR,
            f"'{second.name}' cannot be combined with '{item.name}'",
        )
    return None


def _check_toppings(
    schema: AdditionalToppingsSchema, selection: SchemaSelection
) -> SelectionError | None:
    config = schema.config
    word = "option" if config.is_single_select else "topping"
    selected_count = len(selected_toppings(selection))

    if schema.is_required and selected_count == 0:
        return _error(
            schema,
            SelectionErrorKind.MISSING_REQUIRED_SELECTION,
            f"Please select at least one {word}",
        )
    if config.min_selections is not None and selected_count < config.min_selections:
        return _error(
            schema,
            SelectionErrorKind.BELOW_MINIMUM_SELECTIONS,
            f"Please select at least {_plural(config.min_selections, word)}",
        )
    if config.max_selections is not None and selected_count > config.max_selections:
        return _error(
            schema,
            SelectionErrorKind.ABOVE_MAXIMUM_SELECTIONS,
            f"Please select no more than {_plural(config.max_selections, word)}",
        )
    return None


def _check_single_choice(
    schema: SingleChoiceOptionsSchema, selection: SchemaSelection
) -> SelectionError | None:
    if schema.is_required and not selected_value(selection, OPTION_KEY):
        return _error(
            schema,
            SelectionErrorKind.MISSING_REQUIRED_SELECTION,
            "Please select an option",
        )
    return None


def _check_known_options(
    schema: Any, selection: SchemaSelection
) -> SelectionError | None:
    """Selected ids must be declared by the schema, when it declares any."""
    declared = set(schema.option_ids())
    if not declared:
        return None
    for value in selection.values.values():
        for option_id in as_id_list(value):
            if option_id not in declared:
                return _error(
                    schema,
                    SelectionErrorKind.UNKNOWN_OPTION,
                    f"'{option_id}' is not an available choice for {_label(schema)}",
                )
    return None


def _check_schema(
    schema: Any,
    selection: SchemaSelection,
    item: CatalogItem,
    catalog_lookup: CatalogLookup | None,
) -> SelectionError | None:
    if isinstance(schema, SizeSelectionSchema):
        error = _check_size(schema, selection)
    elif isinstance(schema, HalfAndHalfSchema):
        error = _check_half_and_half(schema, selection, item, catalog_lookup)
    elif isinstance(schema, AdditionalToppingsSchema):
        error = _check_toppings(schema, selection)
    elif isinstance(schema, SingleChoiceOptionsSchema):
        error = _check_single_choice(schema, selection)
    else:
        error = None
    return error or _check_known_options(schema, selection)


def validate_selections(
    item: CatalogItem,
    schemas: Sequence[Any],
    state: SelectionState,
    catalog_lookup: CatalogLookup | None = None,
) -> list[SelectionError]:
    """
    Check a customer's selections against every active schema.

    With a catalog_lookup, a half-and-half second item must also exist,
    be available and belong to an allowed category. Server-side callers
    always pass one.

    Returns:
        One SelectionError per failing schema, in schema order. Empty when
        the selections can be committed.
    """
    errors: list[SelectionError] = []
    for schema in schemas:
        if not schema.is_active:
            continue
        selection = state.for_schema(schema.id)
        error = _check_schema(schema, selection, item, catalog_lookup)
        if error is not None:
            errors.append(error)
    return errors
