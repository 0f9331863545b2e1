"""Recurring transaction scheduling.

The module-level functions are pure: they compute recurrence dates and
decide whether a template is due or needs a reminder, without touching
storage. ``RecurringTransactionService`` wires them to the database, a
``TransactionWriter`` that materializes due transactions and an optional
``ReminderNotifier``.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional, Protocol

from dateutil.relativedelta import relativedelta

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    Frequency,
    RecurringTransactionTemplate,
    ReminderPayload,
)
from ledgerbook.domain.errors import (
    DomainError,
    NotFoundError,
    ValidationError,
    account_not_found,
    template_not_found,
)
from ledgerbook.domain.ledger import validate_transaction_fields
from ledgerbook.utils.dates import (
    add_months,
    at_hour,
    start_of_day,
    sunday_based_weekday,
    to_day,
)

logger = logging.getLogger(__name__)

# Upper bound on occurrences skipped when realigning a stale template
MAX_REALIGN_STEPS = 3660

DAY_RANGES = {
    Frequency.WEEKLY: (0, 6),
    Frequency.MONTHLY: (1, 31),
    Frequency.YEARLY: (1, 31),
}


class TransactionWriter(Protocol):
    """Write path that persists a new double-entry transaction."""

    def create_transaction(
        self,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal,
        date: datetime,
        note: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> int: ...


class ReminderNotifier(Protocol):
    """Delivery mechanism for advance reminders."""

    def schedule(self, payload: ReminderPayload) -> None: ...


@dataclass(frozen=True)
class ReminderPolicy:
    """Guard bands applied before a reminder is scheduled."""

    hour: int = 9
    min_occurrence_horizon: timedelta = timedelta(days=1)
    min_lead_time: timedelta = timedelta(minutes=5)
    max_horizon_years: int = 1


def parse_frequency(value: str | Frequency) -> Frequency:
    """Coerce a string into a Frequency.

    Raises:
        ValidationError: If the value is not a known frequency
    """
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid frequency: {value}")


def validate_recurrence(frequency: Frequency, day_of_recurrence: Optional[int]) -> None:
    """Reject a day of recurrence outside the range of its frequency.

    Weekly days run 0 (Sunday) to 6 (Saturday); monthly and yearly days run
    1 to 31. Daily templates ignore the day.

    Raises:
        ValidationError: If the day is missing or out of range
    """
    bounds = DAY_RANGES.get(frequency)
    if bounds is None:
        return
    low, high = bounds
    if day_of_recurrence is None or not low <= day_of_recurrence <= high:
        raise ValidationError(
            f"Day of recurrence for {frequency.value} must be between {low} and {high}"
        )


def calculate_next_occurrence(
    frequency: Frequency,
    day_of_recurrence: int,
    base_date: date,
    last_created_date: Optional[date] = None,
) -> date:
    """Next due date strictly after the base date.

    The base is ``last_created_date`` when given, otherwise ``base_date``.
    Monthly and yearly results are clamped to the last day of the target
    month, so day 31 lands on the 30th in April and on Feb 28 in
    non-leap years.
    """
    base = to_day(last_created_date or base_date)

    if frequency == Frequency.DAILY:
        return base + timedelta(days=1)

    if frequency == Frequency.WEEKLY:
        days_until = (day_of_recurrence - sunday_based_weekday(base)) % 7
        return base + timedelta(days=days_until or 7)

    if frequency == Frequency.MONTHLY:
        return add_months(base, 1, day_of_recurrence)

    return add_months(base, 12, day_of_recurrence)


def should_create_transaction_today(
    template: RecurringTransactionTemplate, today: Optional[date] = None
) -> bool:
    """Return True if the template must materialize a transaction today.

    Day granularity only. A template whose ``last_created_date`` is today
    has already been materialized and is not due again.
    """
    if not template.is_active:
        return False

    today = to_day(today or date.today())
    if today != to_day(template.next_occurrence):
        return False
    if today < to_day(template.start_date):
        return False
    if template.end_date is not None and today > to_day(template.end_date):
        return False
    if template.last_created_date is not None and to_day(template.last_created_date) == today:
        return False
    return True


def compute_reminder_date(
    template: RecurringTransactionTemplate,
    now: Optional[datetime] = None,
    policy: Optional[ReminderPolicy] = None,
) -> Optional[datetime]:
    """When to remind the user ahead of the next occurrence.

    The reminder fires ``notify_before_days`` days before the occurrence at
    ``policy.hour``. There is no reminder on the due day itself. Returns
    None when reminders are disabled or a guard band applies.
    """
    policy = policy or ReminderPolicy()
    if not template.is_active or not template.notify_before_days:
        return None
    if template.notify_before_days < 0:
        return None

    now = now or datetime.now()
    occurrence = start_of_day(template.next_occurrence)
    if occurrence - now < policy.min_occurrence_horizon:
        logger.debug("template %s: occurrence %s inside safety horizon", template.id, occurrence)
        return None

    notification = at_hour(
        to_day(template.next_occurrence) - timedelta(days=template.notify_before_days),
        policy.hour,
    )
    if notification <= now:
        logger.debug("template %s: reminder %s already passed", template.id, notification)
        return None
    if notification <= now + policy.min_lead_time:
        logger.debug("template %s: reminder %s too soon", template.id, notification)
        return None
    if notification > now + relativedelta(years=policy.max_horizon_years):
        logger.debug("template %s: reminder %s too far out", template.id, notification)
        return None
    return notification


def build_reminder(
    template: RecurringTransactionTemplate,
    now: Optional[datetime] = None,
    policy: Optional[ReminderPolicy] = None,
) -> Optional[ReminderPayload]:
    """Reminder payload for a template, or None if no reminder is due."""
    fire_at = compute_reminder_date(template, now=now, policy=policy)
    if fire_at is None:
        return None
    label = template.note or "Repeat transaction"
    return ReminderPayload(
        template_id=template.id,
        fire_at=fire_at,
        title="Repeat Transaction Reminder",
        body=(
            f"Reminder: {label} of {template.amount:,.2f} is due on "
            f"{to_day(template.next_occurrence).isoformat()}"
        ),
        data={
            "recurring_transaction_id": template.id,
            "type": "recurring_transaction_reminder",
        },
    )


class RecurringTransactionService:
    """Service for managing and running recurring transaction templates."""

    def __init__(
        self,
        db: Database,
        writer: Optional[TransactionWriter] = None,
        notifier: Optional[ReminderNotifier] = None,
        policy: Optional[ReminderPolicy] = None,
    ):
        """Initialize recurring transaction service.

        Args:
            db: Database instance
            writer: Write path used to materialize due transactions
            notifier: Optional reminder delivery mechanism
            policy: Reminder guard bands (defaults to ReminderPolicy())
        """
        self.db = db
        self.writer = writer
        self.notifier = notifier
        self.policy = policy or ReminderPolicy()

    def _require_accounts(self, debit_account_id: int, credit_account_id: int) -> None:
        for account_id in (debit_account_id, credit_account_id):
            if self.db.get_account(account_id) is None:
                raise NotFoundError(account_not_found(account_id))

    def require_template(self, template_id: int) -> RecurringTransactionTemplate:
        """Get a template or raise NotFoundError."""
        template = self.db.get_recurring_template(template_id)
        if template is None:
            raise NotFoundError(template_not_found(template_id))
        return template

    def get_template(self, template_id: int) -> Optional[RecurringTransactionTemplate]:
        return self.db.get_recurring_template(template_id)

    def list_templates(self, active_only: bool = False) -> list[RecurringTransactionTemplate]:
        return self.db.list_recurring_templates(active_only=active_only)

    def create_template(
        self,
        amount: Decimal,
        debit_account_id: int,
        credit_account_id: int,
        frequency: str | Frequency,
        day_of_recurrence: Optional[int],
        start_date: date,
        end_date: Optional[date] = None,
        notify_before_days: Optional[int] = None,
        note: Optional[str] = None,
    ) -> int:
        """Create a recurring transaction template.

        Args:
            amount: Amount of each materialized transaction
            debit_account_id: Debit leg account ID
            credit_account_id: Credit leg account ID
            frequency: daily, weekly, monthly or yearly
            day_of_recurrence: Weekday (0 = Sunday) or day of month
            start_date: First day the template is in force
            end_date: Optional last day the template is in force
            notify_before_days: Days of advance reminder (0 or None disables)
            note: Optional note copied onto each transaction

        Returns:
            Template ID

        Raises:
            ValidationError: On invalid amount, legs, frequency, day or dates
            NotFoundError: If either account does not exist
        """
        validate_transaction_fields(amount, debit_account_id, credit_account_id)
        frequency = parse_frequency(frequency)
        validate_recurrence(frequency, day_of_recurrence)
        if day_of_recurrence is None:
            # Daily templates ignore the day
            day_of_recurrence = 1
        if end_date is not None and end_date <= start_date:
            raise ValidationError("End date must be after start date")
        if notify_before_days is not None and notify_before_days < 0:
            raise ValidationError("Notify before days must be 0 or positive")
        self._require_accounts(debit_account_id, credit_account_id)

        next_occurrence = calculate_next_occurrence(frequency, day_of_recurrence, start_date)
        template_id = self.db.create_recurring_template(
            amount=amount,
            debit_account_id=debit_account_id,
            credit_account_id=credit_account_id,
            frequency=frequency,
            day_of_recurrence=day_of_recurrence,
            start_date=start_date,
            end_date=end_date,
            next_occurrence=next_occurrence,
            notify_before_days=notify_before_days or None,
            note=note.strip() if note and note.strip() else None,
        )
        logger.info(
            "created recurring template %s (%s, next %s)",
            template_id,
            frequency.value,
            next_occurrence,
        )
        return template_id

    def update_template(
        self,
        template_id: int,
        amount: Optional[Decimal] = None,
        debit_account_id: Optional[int] = None,
        credit_account_id: Optional[int] = None,
        frequency: Optional[str | Frequency] = None,
        day_of_recurrence: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        clear_end_date: bool = False,
        notify_before_days: Optional[int] = None,
        note: Optional[str] = None,
    ) -> None:
        """Update template fields.

        The next occurrence is recomputed from the last created date (or the
        start date) whenever frequency, day of recurrence or start date change.

        Raises:
            NotFoundError: If the template or an account does not exist
            ValidationError: If the merged template would be invalid
        """
        current = self.require_template(template_id)

        new_amount = amount if amount is not None else current.amount
        new_debit = debit_account_id if debit_account_id is not None else current.debit_account_id
        new_credit = credit_account_id if credit_account_id is not None else current.credit_account_id
        validate_transaction_fields(new_amount, new_debit, new_credit)
        if debit_account_id is not None or credit_account_id is not None:
            self._require_accounts(new_debit, new_credit)

        new_frequency = parse_frequency(frequency) if frequency is not None else current.frequency
        new_day = day_of_recurrence if day_of_recurrence is not None else current.day_of_recurrence
        validate_recurrence(new_frequency, new_day)

        if clear_end_date and end_date is not None:
            raise ValidationError("Cannot set both end_date and clear_end_date")
        new_start = start_date if start_date is not None else current.start_date
        new_end = None if clear_end_date else (end_date if end_date is not None else current.end_date)
        if new_end is not None and new_end <= new_start:
            raise ValidationError("End date must be after start date")

        if notify_before_days is not None and notify_before_days < 0:
            raise ValidationError("Notify before days must be 0 or positive")

        next_occurrence = current.next_occurrence
        if frequency is not None or day_of_recurrence is not None or start_date is not None:
            next_occurrence = calculate_next_occurrence(
                new_frequency, new_day, new_start, current.last_created_date
            )

        self.db.update_recurring_template(
            template_id,
            amount=new_amount,
            debit_account_id=new_debit,
            credit_account_id=new_credit,
            frequency=new_frequency,
            day_of_recurrence=new_day,
            start_date=new_start,
            end_date=new_end,
            next_occurrence=next_occurrence,
            notify_before_days=(
                current.notify_before_days
                if notify_before_days is None
                else (notify_before_days or None)
            ),
            note=current.note if note is None else (note.strip() or None),
        )

    def set_active(self, template_id: int, is_active: bool) -> None:
        """Pause or resume a template."""
        self.require_template(template_id)
        self.db.update_recurring_template(template_id, is_active=is_active)
        logger.info("recurring template %s %s", template_id, "resumed" if is_active else "paused")

    def realign(self, template: RecurringTransactionTemplate, today: date) -> RecurringTransactionTemplate:
        """Move a stale next occurrence forward to today or later.

        Occurrences missed while nothing was running are skipped rather than
        back-filled.
        """
        next_occurrence = template.next_occurrence
        steps = 0
        while next_occurrence < today and steps < MAX_REALIGN_STEPS:
            next_occurrence = calculate_next_occurrence(
                template.frequency, template.day_of_recurrence, next_occurrence
            )
            steps += 1
        if next_occurrence == template.next_occurrence:
            return template
        logger.warning(
            "recurring template %s skipped %d missed occurrence(s); next is %s",
            template.id,
            steps,
            next_occurrence,
        )
        self.db.update_recurring_template(template.id, next_occurrence=next_occurrence)
        return self.require_template(template.id)

    def process_due(self, today: Optional[date] = None) -> list[int]:
        """Materialize every template due today and advance its schedule.

        Each template is materialized and advanced inside one unit of work,
        so a re-run on the same day finds ``last_created_date == today`` and
        skips it.

        Returns:
            IDs of the transactions created

        Raises:
            ValueError: If the service has no TransactionWriter
        """
        if self.writer is None:
            raise ValueError("A TransactionWriter is required to process due templates")

        today = to_day(today or date.today())
        created: list[int] = []
        for template in self.db.list_recurring_templates(active_only=True):
            template = self.realign(template, today)
            if not should_create_transaction_today(template, today):
                continue
            try:
                with self.db.atomic():
                    transaction_id = self.writer.create_transaction(
                        debit_account_id=template.debit_account_id,
                        credit_account_id=template.credit_account_id,
                        amount=template.amount,
                        date=start_of_day(today),
                        note=template.note,
                    )
                    self.db.update_recurring_template(
                        template.id,
                        last_created_date=today,
                        next_occurrence=calculate_next_occurrence(
                            template.frequency,
                            template.day_of_recurrence,
                            template.start_date,
                            today,
                        ),
                    )
            except DomainError as e:
                logger.warning("recurring template %s not materialized: %s", template.id, e)
                continue
            logger.info(
                "recurring template %s materialized transaction %s", template.id, transaction_id
            )
            created.append(transaction_id)
        return created

    def schedule_reminders(self, now: Optional[datetime] = None) -> list[ReminderPayload]:
        """Compute reminders for active templates and hand them to the notifier.

        Templates inside a guard band are skipped; that is not an error.
        """
        now = now or datetime.now()
        payloads: list[ReminderPayload] = []
        for template in self.db.list_recurring_templates(active_only=True):
            payload = build_reminder(template, now=now, policy=self.policy)
            if payload is None:
                continue
            if self.notifier is not None:
                self.notifier.schedule(payload)
            payloads.append(payload)
        return payloads
