"""Invoice document models handed to rendering and export."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InvoiceLineItem(BaseModel):
    """Single priced line on an invoice."""

    model_config = ConfigDict(frozen=True)

    description: str
    hours: float = Field(ge=0.0)
    amount: float


class InvoiceDocument(BaseModel):
    """Computed invoice ready for an external renderer."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    billed_to: str
    pay_to: str
    date: str
    pay_using: str
    pay_info: str
    rate: float = Field(ge=0.0)
    line_items: list[InvoiceLineItem]
    total_hours: float
    total_amount: float
