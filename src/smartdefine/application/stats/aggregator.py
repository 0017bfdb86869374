"""
Statistics aggregator for deriving study summaries from a word collection.

This is a pure computation module with no I/O.
"""

from datetime import date, datetime, timedelta, tzinfo

from smartdefine.application.utils.clock import as_utc, local_date, utc_now
from smartdefine.domain.constants import Difficulty
from smartdefine.domain.models import Collection, StudyStats


class StatsAggregator:
    """
    Computes StudyStats over a whole collection.

    Stateless and side-effect free.

    Args:
        treat_missing_as_new: Count records with no (or an unknown) difficulty
            as new. When False they only contribute to the total.
        tz: Timezone defining calendar days for today's reviews and the streak.
            None means the process-local timezone.
    """

    def __init__(self, treat_missing_as_new: bool = True, tz: tzinfo | None = None):
        self.treat_missing_as_new = treat_missing_as_new
        self.tz = tz

    def aggregate(self, collection: Collection, now: datetime | None = None) -> StudyStats:
        now = as_utc(now) if now else utc_now()
        today = local_date(now, self.tz)

        tiers = {Difficulty.NEW: 0, Difficulty.LEARNING: 0, Difficulty.MASTERED: 0}
        total = overdue = today_reviews = 0

        for records in collection.values():
            for record in records:
                total += 1

                difficulty = record.difficulty
                if difficulty is None and self.treat_missing_as_new:
                    difficulty = Difficulty.NEW
                if difficulty in tiers:
                    tiers[difficulty] += 1

                # Same boundary as the selector: due at the exact instant counts.
                if record.next_review is None or as_utc(record.next_review) <= now:
                    overdue += 1

                if record.last_reviewed and local_date(record.last_reviewed, self.tz) == today:
                    today_reviews += 1

        return StudyStats(
            total_words=total,
            new_words=tiers[Difficulty.NEW],
            learning_words=tiers[Difficulty.LEARNING],
            mastered_words=tiers[Difficulty.MASTERED],
            overdue_words=overdue,
            today_reviews=today_reviews,
            current_streak=self.current_streak(collection, now),
        )

    def current_streak(self, collection: Collection, now: datetime | None = None) -> int:
        """
        Consecutive calendar days, ending today, with at least one review.

        Returns 0 when nothing was reviewed today.
        """
        now = as_utc(now) if now else utc_now()
        today = local_date(now, self.tz)

        review_dates: set[date] = {
            local_date(record.last_reviewed, self.tz)
            for records in collection.values()
            for record in records
            if record.last_reviewed
        }
        if today not in review_dates:
            return 0

        streak = 1
        ordered = sorted((d for d in review_dates if d <= today), reverse=True)
        for newer, older in zip(ordered, ordered[1:]):
            if newer - older != timedelta(days=1):
                break
            streak += 1
        return streak
