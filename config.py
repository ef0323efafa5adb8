from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Loan Application API"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./loan_applications.db"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    log_level: str = "INFO"
    log_json: bool = True

    # Nominal annual rate applied to every quote (0.05 = 5%)
    annual_interest_rate: Decimal = Decimal("0.05")
    require_authenticated_applicant: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
