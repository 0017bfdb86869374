"""Notifier adapter that reports reminders through the logging system."""

import logging

from smartdefine.domain.ports import Notifier

logger = logging.getLogger("smartdefine.reminders")


class LoggingNotifier(Notifier):
    def __init__(self):
        self.badge = 0

    async def notify(self, title: str, message: str) -> None:
        logger.info(f"{title}: {message}")

    async def set_badge(self, count: int) -> None:
        if count != self.badge:
            logger.info(f"Overdue badge: {count or 'cleared'}")
        self.badge = count
