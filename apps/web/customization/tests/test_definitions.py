"""Tests for author-time schema definition checks."""

import pytest
from pizzeria_schemas import SchemaType

from apps.web.customization.engine.definitions import check_definition, definition_errors
from apps.web.customization.exceptions import SchemaDefinitionError


def toppings(**config) -> dict:
    return {"type": "additional_toppings", "config": {"toppings": [{"id": "cheese"}], **config}}


class TestSingleChoiceDefinition:
    """single_choice_options is fixed to one selection."""

    def test_defaults_are_valid(self) -> None:
        """Leaving maxSelections/allowMultiple out is fine."""
        definition = {"type": "single_choice_options", "config": {"options": [{"id": "a"}]}}

        assert definition_errors(definition) == []

    def test_max_selections_must_be_one(self) -> None:
        """maxSelections other than 1 is rejected."""
        definition = {"type": "single_choice_options", "config": {"maxSelections": 2}}

        assert "single_choice_options must have maxSelections = 1" in definition_errors(definition)

    def test_allow_multiple_must_be_false(self) -> None:
        """allowMultiple=true is rejected."""
        definition = {"type": "single_choice_options", "config": {"allowMultiple": True}}

        assert "single_choice_options must have allowMultiple = false" in definition_errors(
            definition
        )


class TestToppingsDefinition:
    """additional_toppings cardinality rules."""

    @pytest.mark.parametrize(
        "config",
        [
            {"minSelections": 0, "maxSelections": 3, "allowMultiple": True},
            {"minSelections": 1, "maxSelections": 1, "allowMultiple": False},
            {"maxSelections": 1},
            {},
        ],
    )
    def test_valid(self, config: dict) -> None:
        """Consistent bounds pass."""
        assert definition_errors(toppings(**config)) == []

    @pytest.mark.parametrize(
        ("config", "message"),
        [
            ({"minSelections": -1}, "minSelections cannot be negative"),
            ({"maxSelections": 0}, "maxSelections must be at least 1"),
            (
                {"minSelections": 3, "maxSelections": 2, "allowMultiple": True},
                "minSelections cannot be greater than maxSelections",
            ),
            (
                {"maxSelections": 1, "allowMultiple": True},
                "allowMultiple cannot be true when maxSelections is 1",
            ),
            (
                {"maxSelections": 3, "allowMultiple": False},
                "allowMultiple must be true when maxSelections > 1",
            ),
            ({"maxSelections": "three"}, "maxSelections must be a whole number"),
        ],
    )
    def test_invalid(self, config: dict, message: str) -> None:
        """Each broken rule is reported."""
        assert message in definition_errors(toppings(**config))

    def test_snake_case_keys(self) -> None:
        """Stored configs may use snake_case keys."""
        errors = definition_errors(toppings(min_selections=4, max_selections=2))

        assert "minSelections cannot be greater than maxSelections" in errors


class TestGeneralDefinition:
    """Checks shared by every type."""

    def test_type_required(self) -> None:
        """A definition without a type is rejected."""
        assert definition_errors({"config": {}}) == ["type is required"]

    def test_config_must_be_object(self) -> None:
        """config must be a JSON object."""
        assert definition_errors({"type": "size_selection", "config": "sizes"}) == [
            "config must be an object"
        ]

    def test_pricing_config_must_be_object(self) -> None:
        """pricing_config must be a JSON object."""
        errors = definition_errors(
            {"type": "size_selection", "config": {}, "pricing_config": ["a"]}
        )

        assert errors == ["pricingConfig must be an object"]

    def test_config_shape_checked(self) -> None:
        """Configs that do not fit their type are reported by field."""
        errors = definition_errors(
            {"type": "half_and_half", "config": {"combinationFee": -5}}
        )

        assert len(errors) == 1
        assert errors[0].startswith("half_and_half.config.")

    def test_unknown_types_allowed(self) -> None:
        """Legacy types are stored as-is."""
        assert definition_errors({"type": "sauce_choice", "config": {"options": []}}) == []

    def test_enum_type_accepted(self) -> None:
        """A SchemaType member works like its string value."""
        definition = {"type": SchemaType.SIZE_SELECTION, "config": {"sizes": [{"id": "16cm"}]}}

        assert definition_errors(definition) == []

    def test_camel_case_pricing_config_checked(self) -> None:
        """pricingConfig is read under either spelling."""
        errors = definition_errors({"type": "size_selection", "config": {}, "pricingConfig": 5})

        assert errors == ["pricingConfig must be an object"]


class TestPricingConfigDefinition:
    """Stored prices must be usable numbers."""

    @pytest.mark.parametrize(
        "pricing_config",
        [
            {"16cm": {"price": 40000}},
            {"16cm": 40000},
            {"16cm": {"price": "40000.5"}},
            {"16cm": {"label": "no price"}},
            {"halfAndHalfFee": 0},
        ],
    )
    def test_valid(self, pricing_config: dict) -> None:
        """Numbers, numeric strings and entries without a price pass."""
        definition = {"type": "size_selection", "config": {}, "pricingConfig": pricing_config}

        assert definition_errors(definition) == []

    @pytest.mark.parametrize(
        ("price", "message"),
        [
            ("free", "pricingConfig.16cm: price must be a number"),
            (True, "pricingConfig.16cm: price must be a number"),
            ("NaN", "pricingConfig.16cm: price must be a number"),
            (-500, "pricingConfig.16cm: price is out of range"),
            ("1e40", "pricingConfig.16cm: price is out of range"),
        ],
    )
    def test_invalid(self, price: object, message: str) -> None:
        """Non-numeric, negative and huge prices are rejected."""
        definition = {
            "type": "size_selection",
            "config": {},
            "pricing_config": {"16cm": {"price": price}},
        }

        assert definition_errors(definition) == [message]


class TestDefaultOptionDefinition:
    """default_option_id must name one of the schema's options."""

    def test_known_default_passes(self) -> None:
        """A default that is one of the sizes is valid."""
        definition = {
            "type": "size_selection",
            "config": {"sizes": [{"id": "16cm"}, {"id": "20cm"}]},
            "default_option_id": "20cm",
        }

        assert definition_errors(definition) == []

    def test_stale_default_rejected(self) -> None:
        """A default that no longer matches an option is reported."""
        definition = {
            "type": "single_choice_options",
            "config": {"options": [{"id": "thin"}, {"id": "thick"}]},
            "defaultOptionId": "stuffed",
        }

        assert definition_errors(definition) == [
            "defaultOptionId 'stuffed' is not one of the options"
        ]

    def test_schema_without_options_ignores_default(self) -> None:
        """Half-and-half has no option list to check against."""
        definition = {"type": "half_and_half", "config": {}, "default_option_id": "hh"}

        assert definition_errors(definition) == []


class TestCheckDefinition:
    """check_definition() raises with every violation."""

    def test_raises_with_all_errors(self) -> None:
        """Every violated rule is carried by the exception."""
        with pytest.raises(SchemaDefinitionError) as exc_info:
            check_definition(toppings(minSelections=-1, maxSelections=0))

        assert exc_info.value.errors == [
            "minSelections cannot be negative",
            "maxSelections must be at least 1",
        ]
        assert "minSelections cannot be negative" in exc_info.value.message

    def test_valid_definition_passes(self) -> None:
        """A valid definition does not raise."""
        check_definition({"type": "size_selection", "config": {"sizes": [{"id": "16cm"}]}})
