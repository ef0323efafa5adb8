"""
Tests for the application lifecycle manager against the in-memory repository.
Run from the project root: python -m pytest tests/test_lifecycle.py -v
"""
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from errors import InvalidArgument, NotFound, ValidationError
from repositories import InMemoryApplicationRepository
from schemas.enums import ApplicationStatus, LenderDecision
from services.applications import ApplicationLifecycleManager
from services.calculator import compute_schedule


def _payload(**overrides):
    data = {
        "amount": 1500,
        "duration": 6,
        "purpose": "travaux",
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
    data.update(overrides)
    return data


class FakeClock:
    """Returns a new instant, one minute later, on every call."""

    def __init__(self):
        self.current = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.current += timedelta(minutes=1)
        return self.current


class LifecycleTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.repository = InMemoryApplicationRepository()
        self.clock = FakeClock()
        self.manager = ApplicationLifecycleManager(self.repository, annual_rate=Decimal("0.05"), clock=self.clock)

    async def _create(self, **overrides):
        return await self.manager.create(_payload(**overrides))


class TestCreate(LifecycleTestCase):
    async def test_create_stamps_server_side_quote(self):
        record = await self._create()
        schedule = compute_schedule(1500, 6, Decimal("0.05"))
        self.assertEqual(record.monthly_payment, str(schedule.periodic_payment))
        self.assertEqual(record.total_cost, str(schedule.total_repayment))
        self.assertEqual(record.monthly_payment, "253.66")
        self.assertEqual(record.total_cost, "1521.96")

    async def test_create_starts_pending_at_step_zero(self):
        record = await self._create()
        self.assertEqual(record.id, 1)
        self.assertEqual(record.status, ApplicationStatus.PENDING)
        self.assertEqual(record.current_step, 0)
        self.assertIsNone(record.lender_response)
        self.assertIsNone(record.account_number)
        self.assertEqual(record.created_at, record.updated_at)
        self.assertFalse(record.marketing_accepted)

    async def test_client_figures_are_ignored(self):
        record = await self._create(monthlyPayment="1.00", totalCost=6)
        self.assertEqual(record.monthly_payment, "253.66")
        self.assertEqual(record.total_cost, "1521.96")

    async def test_terms_not_accepted_is_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            await self._create(termsAccepted=False)
        fields = [e["field"] for e in ctx.exception.errors]
        self.assertEqual(fields, ["termsAccepted"])
        self.assertIn("terms and conditions", ctx.exception.message)
        self.assertEqual(await self.manager.list_all(), [])

    async def test_credit_check_not_accepted_is_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            await self._create(creditCheckAccepted=False)
        self.assertEqual(ctx.exception.errors[0]["field"], "creditCheckAccepted")

    async def test_missing_consents_are_validation_errors(self):
        payload = _payload()
        del payload["termsAccepted"]
        del payload["creditCheckAccepted"]
        with self.assertRaises(ValidationError) as ctx:
            await self.manager.create(payload)
        fields = {e["field"] for e in ctx.exception.errors}
        self.assertEqual(fields, {"termsAccepted", "creditCheckAccepted"})

    async def test_out_of_range_loan_terms(self):
        for overrides in ({"amount": 499}, {"amount": 3001}, {"duration": 2}, {"duration": 13}):
            with self.subTest(**overrides):
                with self.assertRaises(ValidationError):
                    await self._create(**overrides)
        self.assertEqual(await self.manager.list_all(), [])

    async def test_field_level_errors_are_reported_together(self):
        with self.assertRaises(ValidationError) as ctx:
            await self._create(firstName="A", email="not-an-email", phone="123", purpose="")
        fields = {e["field"] for e in ctx.exception.errors}
        self.assertEqual(fields, {"firstName", "email", "phone", "purpose"})

    async def test_closed_sets_are_enforced(self):
        for overrides in ({"employmentStatus": "astronaut"}, {"monthlyIncome": "lots"}, {"purpose": "casino"}):
            with self.subTest(**overrides):
                with self.assertRaises(ValidationError):
                    await self._create(**overrides)

    async def test_negative_expenses_rejected_and_missing_expenses_allowed(self):
        with self.assertRaises(ValidationError):
            await self._create(monthlyExpenses=-1)
        payload = _payload()
        del payload["monthlyExpenses"]
        record = await self.manager.create(payload)
        self.assertIsNone(record.monthly_expenses)

    async def test_owner_is_recorded(self):
        record = await self.manager.create(_payload(), owner_id=42)
        self.assertEqual(record.owner_id, 42)
        self.assertEqual([r.id for r in await self.manager.list_by_owner(42)], [record.id])
        self.assertEqual(await self.manager.list_by_owner(7), [])


class TestAdvanceStep(LifecycleTestCase):
    async def test_advance_sets_step_status_and_timestamp(self):
        record = await self._create()
        updated = await self.manager.advance_step(record.id, 3)
        self.assertEqual(updated.current_step, 3)
        self.assertEqual(updated.status, ApplicationStatus.STEP3)
        self.assertEqual(updated.step3_completed_at, self.clock.current)
        self.assertEqual(updated.updated_at, self.clock.current)
        self.assertIsNone(updated.step1_completed_at)

    async def test_step_seven_completes_application(self):
        record = await self._create()
        updated = await self.manager.advance_step(record.id, 7)
        self.assertEqual(updated.status, ApplicationStatus.COMPLETED)
        self.assertEqual(updated.current_step, 7)
        self.assertIsNotNone(updated.step7_completed_at)

    async def test_unknown_application_is_not_found(self):
        with self.assertRaises(NotFound):
            await self.manager.advance_step(999, 1)

    async def test_out_of_range_steps_are_rejected_without_mutation(self):
        record = await self._create()
        before = await self.manager.get(record.id)
        for step in (0, 8, -1, None, "3", 2.0, True):
            with self.subTest(step=step):
                with self.assertRaises(InvalidArgument):
                    await self.manager.advance_step(record.id, step)
        self.assertEqual(await self.manager.get(record.id), before)

    async def test_step_is_checked_before_the_record_is_loaded(self):
        with self.assertRaises(InvalidArgument):
            await self.manager.advance_step(999, 9)

    async def test_first_advance_stamps_the_step(self):
        record = await self._create()
        self.assertIsNone(record.step2_completed_at)
        updated = await self.manager.advance_step(record.id, 2)
        self.assertIsNotNone(updated.step2_completed_at)

    async def test_re_advance_keeps_the_first_timestamp(self):
        record = await self._create()
        first = await self.manager.advance_step(record.id, 2)
        second = await self.manager.advance_step(record.id, 2)
        self.assertEqual(second.step2_completed_at, first.step2_completed_at)
        self.assertGreater(second.updated_at, first.updated_at)

    async def test_regression_is_rejected_without_mutation(self):
        record = await self._create()
        await self.manager.advance_step(record.id, 5)
        before = await self.manager.get(record.id)
        with self.assertRaises(InvalidArgument):
            await self.manager.advance_step(record.id, 2)
        after = await self.manager.get(record.id)
        self.assertEqual(after, before)
        self.assertIsNone(after.step2_completed_at)
        self.assertEqual(after.status, ApplicationStatus.STEP5)

    async def test_completed_application_accepts_no_further_step(self):
        record = await self._create()
        completed = await self.manager.advance_step(record.id, 7)
        for step in (3, 7):
            with self.subTest(step=step):
                with self.assertRaises(InvalidArgument):
                    await self.manager.advance_step(record.id, step)
        self.assertEqual(await self.manager.get(record.id), completed)

    async def test_skipped_steps_keep_timestamps_in_step_order(self):
        record = await self._create()
        await self.manager.advance_step(record.id, 2)
        record = await self.manager.advance_step(record.id, 5)
        self.assertIsNone(record.step3_completed_at)
        self.assertLessEqual(record.step2_completed_at, record.step5_completed_at)

    async def test_timestamps_follow_step_order_when_advanced_in_order(self):
        record = await self._create()
        for step in range(1, 8):
            record = await self.manager.advance_step(record.id, step)
        stamps = [record.step_completed_at(step) for step in range(1, 8)]
        self.assertEqual(stamps, sorted(stamps))
        self.assertEqual(record.status, ApplicationStatus.COMPLETED)


class TestLender(LifecycleTestCase):
    async def test_assign_lender_leaves_status_untouched(self):
        record = await self._create()
        await self.manager.advance_step(record.id, 2)
        updated = await self.manager.assign_lender(record.id, "LND-01", "Banque Horizon")
        self.assertEqual(updated.lender_id, "LND-01")
        self.assertEqual(updated.lender_name, "Banque Horizon")
        self.assertEqual(updated.status, ApplicationStatus.STEP2)
        self.assertEqual(updated.current_step, 2)

    async def test_assign_lender_requires_both_fields(self):
        record = await self._create()
        for lender_id, lender_name in (("", "Bank"), ("LND-01", ""), (None, "Bank"), ("LND-01", "   ")):
            with self.subTest(lender_id=lender_id, lender_name=lender_name):
                with self.assertRaises(InvalidArgument):
                    await self.manager.assign_lender(record.id, lender_id, lender_name)

    async def test_assign_lender_unknown_application(self):
        with self.assertRaises(NotFound):
            await self.manager.assign_lender(404, "LND-01", "Bank")

    async def test_unknown_response_is_invalid(self):
        record = await self._create()
        with self.assertRaises(InvalidArgument):
            await self.manager.record_lender_response(record.id, "maybe")
        self.assertIsNone((await self.manager.get(record.id)).lender_response)

    async def test_response_and_message_are_stored_without_status_change(self):
        record = await self._create()
        updated = await self.manager.record_lender_response(record.id, "approved", "congrats")
        self.assertEqual(updated.lender_response, LenderDecision.APPROVED)
        self.assertEqual(updated.lender_message, "congrats")
        self.assertEqual(updated.status, ApplicationStatus.PENDING)

    async def test_rejection_without_message(self):
        record = await self._create()
        await self.manager.record_lender_response(record.id, "approved", "first")
        updated = await self.manager.record_lender_response(record.id, LenderDecision.REJECTED, "  ")
        self.assertEqual(updated.lender_response, LenderDecision.REJECTED)
        self.assertIsNone(updated.lender_message)

    async def test_response_unknown_application(self):
        with self.assertRaises(NotFound):
            await self.manager.record_lender_response(404, "rejected")


class TestAccountNumberAndStatus(LifecycleTestCase):
    async def test_set_account_number(self):
        record = await self._create()
        updated = await self.manager.set_account_number(record.id, "FR76-0001-0002")
        self.assertEqual(updated.account_number, "FR76-0001-0002")
        self.assertEqual(updated.status, ApplicationStatus.PENDING)

    async def test_account_number_required(self):
        record = await self._create()
        with self.assertRaises(InvalidArgument):
            await self.manager.set_account_number(record.id, "")
        with self.assertRaises(NotFound):
            await self.manager.set_account_number(404, "FR76")

    async def test_set_status(self):
        record = await self._create()
        for status in ("approved", "rejected", "pending"):
            with self.subTest(status=status):
                updated = await self.manager.set_status(record.id, status)
                self.assertEqual(updated.status.value, status)

    async def test_set_status_rejects_values_outside_the_closed_set(self):
        record = await self._create()
        for status in ("archived", "", None, "step3", "completed"):
            with self.subTest(status=status):
                with self.assertRaises(InvalidArgument):
                    await self.manager.set_status(record.id, status)
        self.assertEqual((await self.manager.get(record.id)).status, ApplicationStatus.PENDING)

    async def test_set_status_unknown_application(self):
        with self.assertRaises(NotFound):
            await self.manager.set_status(404, "approved")

    async def test_updated_at_is_bumped(self):
        record = await self._create()
        updated = await self.manager.set_status(record.id, "approved")
        self.assertGreater(updated.updated_at, record.updated_at)
        self.assertEqual(updated.created_at, record.created_at)


class TestReads(LifecycleTestCase):
    async def test_get_unknown_is_not_found(self):
        with self.assertRaises(NotFound):
            await self.manager.get(1)

    async def test_repeated_get_is_identical(self):
        record = await self._create()
        await self.manager.advance_step(record.id, 4)
        first = await self.manager.get(record.id)
        second = await self.manager.get(record.id)
        self.assertEqual(first.to_response(), second.to_response())

    async def test_returned_records_are_copies(self):
        record = await self._create()
        record.first_name = "Changed"
        self.assertEqual((await self.manager.get(record.id)).first_name, "Camille")

    async def test_list_all_in_creation_order(self):
        first = await self._create()
        second = await self._create(amount=800, duration=3)
        self.assertEqual([r.id for r in await self.manager.list_all()], [first.id, second.id])


if __name__ == "__main__":
    unittest.main()
