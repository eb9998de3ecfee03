"""
Selection state helpers.

A SelectionState is created when a customer opens the customization dialog
and discarded on cancel or commit. Writes are never validated; validation
runs once, at commit time.
"""

from collections.abc import Sequence
from typing import Any

from pizzeria_schemas import (
    OPTION_KEY,
    SIZE_KEY,
    TOPPINGS_KEY,
    AdditionalToppingsSchema,
    HalfAndHalfSchema,
    OrderMode,
    SchemaSelection,
    SelectionState,
    SingleChoiceOptionsSchema,
    SizeSelectionSchema,
)


def initial_selection(schema: Any) -> SchemaSelection:
    """
    Starting selection for one schema.

    Sizes are never pre-selected by position. A schema only starts with a
    choice when it declares default_option_id.
    """
    selection = SchemaSelection()
    default = schema.default_option_id or ""

    if isinstance(schema, SizeSelectionSchema):
        if default:
            selection.values[SIZE_KEY] = default
    elif isinstance(schema, AdditionalToppingsSchema):
        if schema.config.is_single_select:
            selection.values[TOPPINGS_KEY] = default
        else:
            selection.values[TOPPINGS_KEY] = [default] if default else []
    elif isinstance(schema, SingleChoiceOptionsSchema):
        selection.values[OPTION_KEY] = default
    elif isinstance(schema, HalfAndHalfSchema):
        selection.order_mode = OrderMode.WHOLE

    return selection


def reset(state: SelectionState, schemas: Sequence[Any]) -> SelectionState:
    """Clear all selections and re-initialise them for the given schemas."""
    state.schemas = {schema.id: initial_selection(schema) for schema in schemas}
    return state


def new_selection_state(schemas: Sequence[Any]) -> SelectionState:
    """Fresh state for a customization session."""
    return reset(SelectionState(), schemas)


def as_id_list(value: Any) -> list[str]:
    """
    Selected ids as a de-duplicated list.

    Multi-select values are lists; single-select values are a string where
    the empty string means nothing selected.
    """
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return list(dict.fromkeys(v for v in value if isinstance(v, str) and v))
    return []


def selected_toppings(selection: SchemaSelection) -> list[str]:
    """Topping ids selected for a toppings schema."""
    return as_id_list(selection.values.get(TOPPINGS_KEY))


def selected_value(selection: SchemaSelection, key: str) -> str:
    """A single-valued selection, or "" when unset."""
    value = selection.values.get(key)
    if isinstance(value, str):
        return value.strip()
    return ""


def normalize(selection: SchemaSelection) -> dict[str, str]:
    """
    Flatten a selection for persistence.

    Lists are joined with commas; empty values are dropped.
    """
    flat: dict[str, str] = {}
    for key, value in selection.values.items():
        ids = as_id_list(value)
        if ids:
            flat[key] = ",".join(ids)
    return flat
