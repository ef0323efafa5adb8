from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, func

from database import Base


class LoanApplication(Base):
    __tablename__ = "loan_applications"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Loan terms; payment and cost are fixed-point strings stamped at creation
    amount = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)
    purpose = Column(String(32), nullable=False)
    monthly_payment = Column(String(32), nullable=False)
    total_cost = Column(String(32), nullable=False)

    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    email = Column(String(320), nullable=False)
    phone = Column(String(32), nullable=False)
    date_of_birth = Column(Date, nullable=False)

    employment_status = Column(String(32), nullable=False)
    monthly_income = Column(String(32), nullable=False)
    monthly_expenses = Column(Integer, nullable=True)

    terms_accepted = Column(Boolean, nullable=False, default=False)
    credit_check_accepted = Column(Boolean, nullable=False, default=False)
    marketing_accepted = Column(Boolean, nullable=False, default=False)

    status = Column(String(32), nullable=False, default="pending", index=True)
    current_step = Column(Integer, nullable=False, default=0)
    step1_completed_at = Column(DateTime(timezone=True), nullable=True)
    step2_completed_at = Column(DateTime(timezone=True), nullable=True)
    step3_completed_at = Column(DateTime(timezone=True), nullable=True)
    step4_completed_at = Column(DateTime(timezone=True), nullable=True)
    step5_completed_at = Column(DateTime(timezone=True), nullable=True)
    step6_completed_at = Column(DateTime(timezone=True), nullable=True)
    step7_completed_at = Column(DateTime(timezone=True), nullable=True)

    lender_id = Column(String(64), nullable=True)
    lender_name = Column(String(256), nullable=True)
    lender_response = Column(String(16), nullable=True)
    lender_message = Column(Text, nullable=True)
    account_number = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
