from fastapi import APIRouter

from config import settings
from schemas.quote import QuoteRequest, QuoteResponse
from services.calculator import compute_schedule

router = APIRouter(prefix="/api", tags=["quotes"])


@router.post("/calculate-loan")
async def calculate_loan(body: QuoteRequest):
    """Preview quote for the form; the same computation is stamped on the record at submission."""
    schedule = compute_schedule(body.amount, body.duration, settings.annual_interest_rate)
    quote = QuoteResponse(
        amount=body.amount,
        duration=body.duration,
        monthly_payment=schedule.periodic_payment,
        total_cost=schedule.total_repayment,
        interest_rate=schedule.annual_rate,
    )
    return quote.model_dump(by_alias=True, mode="json")
