from decimal import Decimal

from pydantic import BaseModel, Field

MIN_AMOUNT = 500
MAX_AMOUNT = 3000
MIN_DURATION = 3
MAX_DURATION = 12


class QuoteRequest(BaseModel):
    amount: int = Field(..., ge=MIN_AMOUNT, le=MAX_AMOUNT, description="Principal in EUR")
    duration: int = Field(..., ge=MIN_DURATION, le=MAX_DURATION, description="Term in months")


class QuoteResponse(BaseModel):
    amount: int
    duration: int
    monthly_payment: Decimal = Field(..., alias="monthlyPayment")
    total_cost: Decimal = Field(..., alias="totalCost")
    interest_rate: Decimal = Field(..., alias="interestRate")

    model_config = {"populate_by_name": True}
