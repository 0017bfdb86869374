"""
Periodic review reminders and the overdue badge.

A single asyncio task polls the scheduling service: the badge is refreshed
every `overdue_check_minutes`, and a reminder goes out once a day at
`reminder_hour` local time.
"""

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone, tzinfo

from smartdefine.application.config import LearningSettings
from smartdefine.application.scheduling import SchedulingService
from smartdefine.application.utils.clock import as_utc, utc_now
from smartdefine.domain.constants import DEFAULT_REMINDER_HOUR, ReviewType
from smartdefine.domain.ports import Notifier

logger = logging.getLogger(__name__)

REMINDER_TITLE = "SmartDefine - Review Time!"
MIN_SLEEP = timedelta(seconds=1)


def next_reminder_time(
    now: datetime | None = None,
    hour: int = DEFAULT_REMINDER_HOUR,
    tz: tzinfo | None = None,
) -> datetime:
    """
    Today at `hour`:00 in `tz` (process-local when None), or tomorrow if that
    instant has already passed. Returned in UTC.
    """
    now = as_utc(now) if now else utc_now()
    local_now = now.astimezone(tz)
    reminder = _localize(datetime.combine(local_now.date(), time(hour)), tz)
    if local_now > reminder:
        tomorrow = local_now.date() + timedelta(days=1)
        reminder = _localize(datetime.combine(tomorrow, time(hour)), tz)
    return reminder.astimezone(timezone.utc)


def _localize(wall: datetime, tz: tzinfo | None) -> datetime:
    """Attach `tz` to a naive wall-clock time, using the offset in force on that date."""
    if tz is None:
        # naive astimezone() reads the system zone rules for that instant
        return wall.astimezone()
    return wall.replace(tzinfo=tz)


class ReminderService:
    def __init__(
        self,
        scheduler: SchedulingService,
        notifier: Notifier,
        settings: LearningSettings | None = None,
        badge_limit: int = 1000,
        tz: tzinfo | None = None,
    ):
        self.scheduler = scheduler
        self.notifier = notifier
        self.settings = settings or LearningSettings()
        self.badge_limit = badge_limit
        self.tz = tz

    async def update_badge(self, now: datetime | None = None) -> int:
        """
        Push the number of due words to the badge. Cleared when reminders are off.
        """
        if not self.settings.review_reminders:
            await self.notifier.set_badge(0)
            return 0

        due = await self.scheduler.get_due(ReviewType.ALL, self.badge_limit, now=now)
        await self.notifier.set_badge(len(due))
        return len(due)

    async def send_reminder(self, now: datetime | None = None) -> bool:
        """
        Notify the learner when words are waiting. Returns True if a notification was sent.
        """
        if not self.settings.review_reminders:
            return False

        due = await self.scheduler.get_due(ReviewType.ALL, self.badge_limit, now=now)
        if not due:
            logger.debug("No words due, skipping reminder")
            return False

        await self.notifier.notify(
            REMINDER_TITLE,
            f"You have {len(due)} words ready for review. Keep your learning streak going!",
        )
        return True

    async def run(self, stop: asyncio.Event) -> None:
        """
        Poll until `stop` is set. Each tick runs to completion before the next
        sleep, so checks never overlap.
        """
        check_every = timedelta(minutes=self.settings.overdue_check_minutes)
        reminder_at = next_reminder_time(hour=self.settings.reminder_hour, tz=self.tz)
        logger.info(
            f"Reminder loop started: badge every {self.settings.overdue_check_minutes} min, "
            f"next reminder at {reminder_at.isoformat()}"
        )

        while not stop.is_set():
            now = utc_now()
            try:
                await self.update_badge(now=now)
                if now >= reminder_at:
                    await self.send_reminder(now=now)
                    reminder_at = next_reminder_time(
                        now + timedelta(seconds=1), self.settings.reminder_hour, self.tz
                    )
            except Exception as e:
                logger.error(f"Reminder check failed: {e}", exc_info=True)

            sleep_for = max(min(check_every, reminder_at - utc_now()), MIN_SLEEP)
            try:
                await asyncio.wait_for(stop.wait(), timeout=sleep_for.total_seconds())
            except asyncio.TimeoutError:
                pass

        logger.info("Reminder loop stopped")
