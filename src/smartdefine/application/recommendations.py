"""Study suggestions derived from the current statistics."""

from smartdefine.application.config import LearningSettings
from smartdefine.domain.constants import MAX_NEW_WORDS_SUGGESTED
from smartdefine.domain.models import Recommendation, StudyStats


def generate_recommendations(
    stats: StudyStats, settings: LearningSettings
) -> list[Recommendation]:
    """
    Build suggestions in a fixed order: daily goal, overdue words, new words, streak.
    Each one is included only when it applies.
    """
    recommendations: list[Recommendation] = []

    remaining = settings.daily_goal - stats.today_reviews
    if remaining > 0:
        recommendations.append(
            Recommendation(
                type="daily_goal",
                priority="high",
                message=f"Complete {remaining} more reviews to reach your daily goal!",
                action="review",
                count=remaining,
            )
        )

    if stats.overdue_words > 0:
        recommendations.append(
            Recommendation(
                type="overdue",
                priority="high",
                message=f"You have {stats.overdue_words} overdue words that need review.",
                action="review_overdue",
                count=stats.overdue_words,
            )
        )

    if stats.new_words > 0:
        count = min(MAX_NEW_WORDS_SUGGESTED, stats.new_words)
        recommendations.append(
            Recommendation(
                type="new_words",
                priority="medium",
                message=f"Start learning {count} new words.",
                action="learn_new",
                count=count,
            )
        )

    if stats.current_streak > 0:
        recommendations.append(
            Recommendation(
                type="streak",
                priority="low",
                message=f"Great job! You're on a {stats.current_streak}-day learning streak!",
                action="continue_streak",
            )
        )

    return recommendations
