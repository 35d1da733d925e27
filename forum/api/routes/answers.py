"""Answer endpoints."""

from typing import Annotated

from fastapi import APIRouter, Form
from loguru import logger

from forum.api.dependencies import AuthenticatedSession, Moderation
from forum.domain.questions import NewAnswer, QuestionId
from forum.infrastructure.store import Store

router = APIRouter(prefix="/answers", tags=["answers"])


@router.post("")
async def add_answer(
    session: AuthenticatedSession,
    checker: Moderation,
    store: Store,
    content: Annotated[str, Form(min_length=1)],
    question_id: Annotated[QuestionId, Form(alias="questionId")],
) -> dict[str, str]:
    """Moderate and store an answer sent as a url-encoded form."""
    censored = await checker.check(content)
    stored = await store.add_answer(
        NewAnswer(content=censored, question_id=question_id)
    )
    logger.info(
        "Answer added",
        answer_id=stored.id,
        question_id=question_id,
        account_id=session.account_id,
    )
    return {"message": "Answer added"}
