from models.application import LoanApplication
from models.user import User

__all__ = [
    "LoanApplication",
    "User",
]
