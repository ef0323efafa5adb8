"""
Seed a demo user and a few applications at different workflow stages.
Run: python -m scripts.seed_demo (from the project root).
"""
import asyncio
import os
import sys

# Add parent so we can import from the project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings
from database import AsyncSessionLocal, init_db
from repositories import SqlAlchemyApplicationRepository, SqlAlchemyUserRepository
from services.applications import ApplicationLifecycleManager

DEMO_USERNAME = "demo"

APPLICANT = {
    "firstName": "Camille",
    "lastName": "Martin",
    "email": "camille.martin@orange.fr",
    "phone": "0612345678",
    "dateOfBirth": "1988-04-12",
    "employmentStatus": "cdi",
    "monthlyIncome": "2000-3000",
    "monthlyExpenses": 900,
    "termsAccepted": True,
    "creditCheckAccepted": True,
}

APPLICATIONS = [
    # (loan terms, workflow actions applied after creation)
    ({"amount": 1500, "duration": 6, "purpose": "travaux"}, []),
    ({"amount": 800, "duration": 3, "purpose": "urgence"}, [("step", 1), ("step", 2), ("lender", ("LND-01", "Banque Horizon"))]),
    (
        {"amount": 3000, "duration": 12, "purpose": "equipement"},
        [("lender", ("LND-02", "Crédit Azur")), ("response", "approved"), ("status", "approved"), ("account", "FR76-0001-0002")],
    ),
]


async def _apply(manager: ApplicationLifecycleManager, application_id: int, action: str, arg) -> None:
    if action == "step":
        await manager.advance_step(application_id, arg)
    elif action == "lender":
        await manager.assign_lender(application_id, *arg)
    elif action == "response":
        await manager.record_lender_response(application_id, arg)
    elif action == "status":
        await manager.set_status(application_id, arg)
    elif action == "account":
        await manager.set_account_number(application_id, arg)
    else:
        raise ValueError(f"Unknown seed action {action}")


async def seed():
    await init_db()
    async with AsyncSessionLocal() as session:
        users = SqlAlchemyUserRepository(session)
        user = await users.get_by_username(DEMO_USERNAME)
        if user:
            print(f"User {DEMO_USERNAME} already exists, skipping")
            return
        user = await users.add(DEMO_USERNAME)
        manager = ApplicationLifecycleManager(
            SqlAlchemyApplicationRepository(session),
            annual_rate=settings.annual_interest_rate,
        )
        for terms, actions in APPLICATIONS:
            record = await manager.create({**APPLICANT, **terms}, owner_id=user.id)
            for action, arg in actions:
                await _apply(manager, record.id, action, arg)
            print(f"Seeded application {record.id}: {terms['amount']} over {terms['duration']} months")
        await session.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
