"""Question endpoints.

Listing is public. Creating, updating and deleting require a session, and
both write paths run the title and content through moderation concurrently
before anything is stored.
"""

from fastapi import APIRouter, Request
from loguru import logger

from forum.api.dependencies import AuthenticatedSession, Moderation
from forum.domain.questions import (
    NewQuestion,
    Question,
    QuestionId,
    extract_pagination,
)
from forum.infrastructure.store import Store
from forum.services.moderation import moderate_fields

router = APIRouter(prefix="/questions", tags=["questions"])


@router.get("")
async def get_questions(request: Request, store: Store) -> list[Question]:
    """List questions, optionally windowed by ``limit`` and ``offset``."""
    pagination = extract_pagination(request.query_params)
    logger.info(
        "Querying questions",
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return await store.get_questions(pagination.limit, pagination.offset)


@router.post("")
async def add_question(
    session: AuthenticatedSession,
    checker: Moderation,
    store: Store,
    question: NewQuestion,
) -> dict[str, str]:
    """Moderate and store a new question."""
    title, content = await moderate_fields(checker, question.title, question.content)
    stored = await store.add_question(
        NewQuestion(title=title, content=content, tags=question.tags)
    )
    logger.info(
        "Question added",
        question_id=stored.id,
        account_id=session.account_id,
    )
    return {"message": "Question added"}


@router.put("/{question_id}")
async def update_question(
    question_id: QuestionId,
    session: AuthenticatedSession,
    checker: Moderation,
    store: Store,
    question: Question,
) -> Question:
    """Moderate and store new title, content and tags for a question."""
    title, content = await moderate_fields(checker, question.title, question.content)
    updated = await store.update_question(
        NewQuestion(title=title, content=content, tags=question.tags), question_id
    )
    logger.info(
        "Question updated",
        question_id=question_id,
        account_id=session.account_id,
    )
    return updated


@router.delete("/{question_id}")
async def delete_question(
    question_id: QuestionId, session: AuthenticatedSession, store: Store
) -> dict[str, str]:
    """Delete a question and its answers."""
    await store.delete_question(question_id)
    logger.info(
        "Question deleted",
        question_id=question_id,
        account_id=session.account_id,
    )
    return {"message": f"Question {question_id} deleted"}
