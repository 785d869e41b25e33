"""
Tests for input normalization: enum spellings, amount coercion and the
pydantic request boundary.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

from modules.tax.inputs import parse_simulation_request
from modules.tax.models import (
    InvalidAmountError,
    InvalidCategoryError,
    InvalidTransmissionTypeError,
    RelationshipCategory,
    SimulationError,
    SimulationInput,
    TransmissionType,
    coerce_amount,
)


class TestNormalization:

    @pytest.mark.parametrize("raw,expected", [
        ("child", RelationshipCategory.CHILD),
        ("enfant", RelationshipCategory.CHILD),
        ("conjoint", RelationshipCategory.SPOUSE),
        ("PACS", RelationshipCategory.SPOUSE),
        ("frere-soeur", RelationshipCategory.SIBLING),
        ("niece-nephew", RelationshipCategory.NIECE_NEPHEW),
        ("neveu_niece", RelationshipCategory.NIECE_NEPHEW),
        (" autre ", RelationshipCategory.OTHER),
        (RelationshipCategory.SIBLING, RelationshipCategory.SIBLING),
    ])
    def test_category_spellings(self, raw, expected):
        assert RelationshipCategory.normalize(raw) is expected

    @pytest.mark.parametrize("raw", ["cousin", "", None, 1])
    def test_unknown_category(self, raw):
        with pytest.raises(InvalidCategoryError):
            RelationshipCategory.normalize(raw)

    @pytest.mark.parametrize("raw,expected", [
        ("inheritance", TransmissionType.INHERITANCE),
        ("succession", TransmissionType.INHERITANCE),
        ("Gift", TransmissionType.GIFT),
        ("DONATION", TransmissionType.GIFT),
    ])
    def test_transmission_type_spellings(self, raw, expected):
        assert TransmissionType.normalize(raw) is expected

    def test_unknown_transmission_type(self):
        with pytest.raises(InvalidTransmissionTypeError):
            TransmissionType.normalize("vente")

    def test_labels_are_french(self):
        assert TransmissionType.INHERITANCE.label == "Succession"
        assert TransmissionType.GIFT.label == "Donation"
        assert RelationshipCategory.SIBLING.label == "Frère / Sœur"


class TestCoerceAmount:

    @pytest.mark.parametrize("raw,expected", [
        (300000, Decimal("300000")),
        (0.1, Decimal("0.1")),
        (Decimal("12.50"), Decimal("12.50")),
        ("50000", Decimal("50000")),
        ("1 000,50", Decimal("1000.50")),
        ("300\u202f000", Decimal("300000")),
        ("7\u00a0967", Decimal("7967")),
        (0, Decimal(0)),
    ])
    def test_accepted_values(self, raw, expected):
        assert coerce_amount(raw, "transfer_amount") == expected

    @pytest.mark.parametrize("raw,reason", [
        (-1, "negative"),
        ("-0.01", "negative"),
        (float("nan"), "not finite"),
        (float("-inf"), "not finite"),
        ("Infinity", "not finite"),
        ("abc", "not a number"),
        (True, "not a number"),
        (None, "not a number"),
    ])
    def test_rejected_values(self, raw, reason):
        with pytest.raises(InvalidAmountError) as exc_info:
            coerce_amount(raw, "prior_gifts_amount")

        assert exc_info.value.reason == reason
        assert exc_info.value.field_name == "prior_gifts_amount"


class TestSimulationInput:

    def test_defaults_and_normalization(self):
        simulation_input = SimulationInput("donation", "enfant", "300000")

        assert simulation_input.transmission_type is TransmissionType.GIFT
        assert simulation_input.relationship_category is RelationshipCategory.CHILD
        assert simulation_input.transfer_amount == Decimal("300000")
        assert simulation_input.prior_gifts_amount == Decimal(0)
        assert not simulation_input.is_spouse_inheritance

    def test_spouse_inheritance_flag(self):
        assert SimulationInput("succession", "conjoint", 1).is_spouse_inheritance
        assert not SimulationInput("donation", "conjoint", 1).is_spouse_inheritance

    def test_frozen(self):
        simulation_input = SimulationInput("gift", "child", 1000)
        with pytest.raises(FrozenInstanceError):
            simulation_input.transfer_amount = Decimal(0)

    def test_errors_share_a_base_class(self):
        with pytest.raises(SimulationError):
            SimulationInput("gift", "child", -1)
        with pytest.raises(ValueError):
            SimulationInput("gift", "cousin", 1)


class TestParseSimulationRequest:

    def test_snake_case_keys(self):
        simulation_input = parse_simulation_request({
            "transmission_type": "gift",
            "relationship_category": "sibling",
            "transfer_amount": 50000,
            "prior_gifts_amount": 1000,
        })

        assert simulation_input == SimulationInput(
            TransmissionType.GIFT, RelationshipCategory.SIBLING, Decimal("50000"), Decimal("1000")
        )

    def test_form_field_aliases(self):
        simulation_input = parse_simulation_request({
            "typeTransmission": "donation",
            "lienParente": "frere-soeur",
            "montantTransmis": "50000",
        })

        assert simulation_input.transmission_type is TransmissionType.GIFT
        assert simulation_input.relationship_category is RelationshipCategory.SIBLING
        assert simulation_input.transfer_amount == Decimal("50000")
        assert simulation_input.prior_gifts_amount == Decimal(0)

    def test_enum_members_pass_through(self):
        simulation_input = parse_simulation_request({
            "transmission_type": TransmissionType.INHERITANCE,
            "relationship_category": RelationshipCategory.SPOUSE,
            "transfer_amount": Decimal("500000"),
        })

        assert simulation_input.is_spouse_inheritance

    def test_invalid_amount_maps_to_amount_error(self):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_simulation_request({
                "transmission_type": "gift",
                "relationship_category": "child",
                "transfer_amount": "-5",
            })

        assert exc_info.value.field_name == "transfer_amount"
        assert exc_info.value.value == "-5"

    def test_missing_amount_maps_to_amount_error(self):
        with pytest.raises(InvalidAmountError) as exc_info:
            parse_simulation_request({"transmission_type": "gift", "relationship_category": "child"})

        assert exc_info.value.field_name == "transfer_amount"

    def test_invalid_category_maps_to_category_error(self):
        with pytest.raises(InvalidCategoryError):
            parse_simulation_request({
                "transmission_type": "gift",
                "relationship_category": "cousin",
                "transfer_amount": 1000,
            })

    def test_invalid_type_maps_to_type_error(self):
        with pytest.raises(InvalidTransmissionTypeError):
            parse_simulation_request({
                "typeTransmission": "vente",
                "lienParente": "enfant",
                "montantTransmis": 1000,
            })
