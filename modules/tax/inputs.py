"""
Simulation Request Parsing

Pydantic boundary between raw caller values (form widgets, query strings,
JSON bodies) and the engine's immutable SimulationInput. Validation failures
are reported with the engine's own exception types.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from decimal import Decimal
from typing import Any, Dict, Mapping

from pydantic import BaseModel, Field, ValidationError, validator

from modules.tax.models import (
    InvalidAmountError,
    InvalidCategoryError,
    InvalidTransmissionTypeError,
    RelationshipCategory,
    SimulationInput,
    TransmissionType,
    coerce_amount,
)

# camelCase field names posted by the web form
FIELD_ALIASES = {
    "typeTransmission": "transmission_type",
    "lienParente": "relationship_category",
    "montantTransmis": "transfer_amount",
    "donationsAnterieures": "prior_gifts_amount",
}


class SimulationRequest(BaseModel):
    """Raw simulation parameters as received from a caller."""

    transmission_type: TransmissionType
    relationship_category: RelationshipCategory
    transfer_amount: Decimal
    prior_gifts_amount: Decimal = Field(default=Decimal(0))

    class Config:
        arbitrary_types_allowed = True

    @validator('transmission_type', pre=True)
    def parse_transmission_type(cls, v):
        return TransmissionType.normalize(v)

    @validator('relationship_category', pre=True)
    def parse_relationship_category(cls, v):
        return RelationshipCategory.normalize(v)

    @validator('transfer_amount', pre=True)
    def parse_transfer_amount(cls, v):
        """Reject negative, non-finite and non-numeric amounts instead of clamping them."""
        return coerce_amount(v, 'transfer_amount')

    @validator('prior_gifts_amount', pre=True)
    def parse_prior_gifts_amount(cls, v):
        return coerce_amount(v, 'prior_gifts_amount')

    def to_input(self) -> SimulationInput:
        return SimulationInput(
            transmission_type=self.transmission_type,
            relationship_category=self.relationship_category,
            transfer_amount=self.transfer_amount,
            prior_gifts_amount=self.prior_gifts_amount,
        )


def _canonical_fields(raw: Mapping[str, Any]) -> Dict[str, Any]:
    data = {}
    for key, value in raw.items():
        data[FIELD_ALIASES.get(key, key)] = value
    return data


def parse_simulation_request(raw: Mapping[str, Any]) -> SimulationInput:
    """
    Parse raw parameters into a SimulationInput.

    Args:
        raw: Mapping with snake_case or web-form camelCase keys

    Returns:
        Validated SimulationInput

    Raises:
        InvalidTransmissionTypeError, InvalidCategoryError, InvalidAmountError:
            for the first invalid field, in declaration order
    """
    data = _canonical_fields(raw)

    try:
        request = SimulationRequest(**data)
    except ValidationError as e:
        raise _translate_validation_error(e, data) from e

    return request.to_input()


def _translate_validation_error(error: ValidationError, data: Mapping[str, Any]) -> Exception:
    """Map the first pydantic error to the engine's exception taxonomy."""
    first = error.errors()[0]
    field_name = str(first["loc"][0]) if first.get("loc") else ""
    message = first.get("msg", "invalid value")

    if field_name == "relationship_category":
        return InvalidCategoryError(message)
    if field_name == "transmission_type":
        return InvalidTransmissionTypeError(message)
    return InvalidAmountError(field_name, data.get(field_name), message)
