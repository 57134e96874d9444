"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Money stays Decimal internally and is emitted as a JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base schema emitting camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DateRangeSchema(CamelModel):
    """Closed date interval covered by a report"""

    start: date
    end: date


class SummarySchema(CamelModel):
    """P&L figures; total_income is net of refunds"""

    total_income: Money
    platform_fees: Money
    withdrawal_fees: Money
    operating_expenses: Money
    net_profit: Money


class TopClientSchema(CamelModel):
    """Client ranked by revenue"""

    name: str
    email: str
    revenue: Money
    invoice_count: int


class ProfitAndLossResponse(CamelModel):
    """Response for GET /v1/finance/p-and-l?format=json"""

    period: str
    date_range: DateRangeSchema
    summary: SummarySchema
    top_clients: List[TopClientSchema]
    currency: str


class FreelancerSchema(CamelModel):
    """Report owner printed on the document"""

    name: str
    email: str


class ProfitAndLossDocument(ProfitAndLossResponse):
    """Payload sent to the document renderer for format=pdf"""

    freelancer: FreelancerSchema
