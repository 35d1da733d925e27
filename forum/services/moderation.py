"""Concurrent moderation of a question's title and content."""

import asyncio
from typing import Protocol

from loguru import logger

from forum.core.exceptions import ModerationError, TaskSchedulingError


class ContentChecker(Protocol):
    """Anything that can censor a piece of text."""

    async def check(self, text: str) -> str:
        """Return the censored form of ``text``."""
        ...


async def moderate_fields(
    checker: ContentChecker, title: str, content: str
) -> tuple[str, str]:
    """Censor ``title`` and ``content`` in parallel.

    Both checks always run to completion; a failing one does not cancel the
    other. Outcomes are inspected title first, so when both fail the title's
    error wins.

    Args:
        checker: Moderation client.
        title: Question title.
        content: Question body.

    Returns:
        tuple[str, str]: Censored title and content.

    Raises:
        ModerationError: The first moderation failure in title, content order.
        TaskSchedulingError: If a task was cancelled or died with an error
            that is not a moderation outcome.
    """
    tasks = (
        asyncio.create_task(checker.check(title), name="moderate-title"),
        asyncio.create_task(checker.check(content), name="moderate-content"),
    )
    results = await asyncio.gather(*tasks, return_exceptions=True)

    censored: list[str] = []
    for task, result in zip(tasks, results, strict=True):
        if isinstance(result, ModerationError):
            raise result
        if isinstance(result, BaseException):
            logger.debug(
                "Task {} ended with {}", task.get_name(), type(result).__name__
            )
            raise TaskSchedulingError(task.get_name(), result)
        censored.append(result)

    logger.debug("Title and content passed moderation")
    return censored[0], censored[1]
