"""
Author-time checks for customization schema definitions.

These run when staff create or update a schema, never at selection time.
"""

import logging
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pizzeria_schemas import SchemaType, parse_schema

from apps.web.customization.engine.pricing import MAX_PRICE
from apps.web.customization.exceptions import SchemaDefinitionError

logger = logging.getLogger(__name__)


def _config_value(config: dict[str, Any], snake: str, camel: str) -> Any:
    """Read a config key stored either as snake_case or camelCase."""
    if snake in config:
        return config[snake]
    return config.get(camel)


def _check_single_choice(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    max_selections = _config_value(config, "max_selections", "maxSelections")
    allow_multiple = _config_value(config, "allow_multiple", "allowMultiple")
    # Fixed characteristics of the type; absent keys take the fixed value.
    if max_selections is not None and max_selections != 1:
        errors.append("single_choice_options must have maxSelections = 1")
    if allow_multiple is not None and allow_multiple is not False:
        errors.append("single_choice_options must have allowMultiple = false")
    return errors


def _check_toppings(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    min_selections = _config_value(config, "min_selections", "minSelections")
    max_selections = _config_value(config, "max_selections", "maxSelections")
    allow_multiple = _config_value(config, "allow_multiple", "allowMultiple")

    for name, value in (
        ("minSelections", min_selections),
        ("maxSelections", max_selections),
    ):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            errors.append(f"{name} must be a whole number")
    if errors:
        return errors

    if min_selections is not None and min_selections < 0:
        errors.append("minSelections cannot be negative")
    if max_selections is not None and max_selections < 1:
        errors.append("maxSelections must be at least 1")
    if (
        min_selections is not None
        and max_selections is not None
        and min_selections > max_selections
    ):
        errors.append("minSelections cannot be greater than maxSelections")

    if max_selections == 1 and allow_multiple is True:
        errors.append("allowMultiple cannot be true when maxSelections is 1")
    if allow_multiple is False and max_selections is not None and max_selections > 1:
        errors.append("allowMultiple must be true when maxSelections > 1")
    return errors


def _price_errors(pricing_config: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    for option_id, entry in pricing_config.items():
        price = entry.get("price") if isinstance(entry, dict) else entry
        if price is None:
            continue
        try:
            amount = Decimal(str(price).strip())
        except InvalidOperation:
            amount = None
        if isinstance(price, bool) or amount is None or not amount.is_finite():
            errors.append(f"pricingConfig.{option_id}: price must be a number")
        elif amount < 0 or amount >= MAX_PRICE:
            errors.append(f"pricingConfig.{option_id}: price is out of range")
    return errors


def definition_errors(definition: dict[str, Any]) -> list[str]:
    """
    Every constraint a schema definition violates.

    Args:
        definition: Schema fields as stored, with at least "type" and
            "config". Top-level keys may be snake_case or camelCase.

    Returns:
        Human-readable messages; empty when the definition is valid.
    """
    schema_type = definition.get("type")
    if isinstance(schema_type, Enum):
        schema_type = schema_type.value
    if not schema_type or not isinstance(schema_type, str):
        return ["type is required"]
    config = definition.get("config") or {}
    if not isinstance(config, dict):
        return ["config must be an object"]

    errors: list[str] = []
    if schema_type == SchemaType.SINGLE_CHOICE_OPTIONS:
        errors.extend(_check_single_choice(config))
    elif schema_type == SchemaType.ADDITIONAL_TOPPINGS:
        errors.extend(_check_toppings(config))

    pricing_config = _config_value(definition, "pricing_config", "pricingConfig")
    if pricing_config is not None and not isinstance(pricing_config, dict):
        errors.append("pricingConfig must be an object")
    elif pricing_config:
        errors.extend(_price_errors(pricing_config))

    if errors:
        return errors

    try:
        schema = parse_schema(
            {**definition, "type": schema_type, "id": str(definition.get("id") or "new")}
        )
    except PydanticValidationError as e:
        return [
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]

    option_ids = schema.option_ids()
    if option_ids and schema.default_option_id and schema.default_option_id not in option_ids:
        errors.append(f"defaultOptionId '{schema.default_option_id}' is not one of the options")
    return errors


def check_definition(definition: dict[str, Any]) -> None:
    """
    Reject an invalid schema definition.

    Raises:
        SchemaDefinitionError: With every violated constraint.
    """
    errors = definition_errors(definition)
    if errors:
        logger.warning(
            "Rejected %s schema definition: %s",
            definition.get("type"),
            "; ".join(errors),
        )
        raise SchemaDefinitionError(errors)
