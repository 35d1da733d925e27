"""Persistence facade used by the route handlers.

ForumStore hides the ORM behind domain records: it accepts and returns the
pydantic models of ``forum.domain`` and turns every storage failure,
missing rows included, into a DatabaseQueryError.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from forum.core.exceptions import DatabaseQueryError
from forum.domain.accounts import Account
from forum.domain.questions import Answer, NewAnswer, NewQuestion, Question
from forum.infrastructure.database import (
    AccountModel,
    AnswerModel,
    BaseRepository,
    DatabaseSession,
    QuestionModel,
)


@contextmanager
def _query_errors(operation: str) -> Iterator[None]:
    """Convert SQLAlchemy failures raised inside the block."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.debug("{} failed: {}", operation, type(e).__name__)
        raise DatabaseQueryError(cause=e) from e


class ForumStore:
    """Accounts, questions and answers over one database session."""

    def __init__(self, session: AsyncSession) -> None:
        self._accounts = BaseRepository(session, AccountModel)
        self._questions = BaseRepository(session, QuestionModel)
        self._answers = BaseRepository(session, AnswerModel)

    async def add_account(self, account: Account) -> Account:
        """Store a new account whose password is already hashed."""
        with _query_errors("add_account"):
            row = await self._accounts.create(
                AccountModel(email=account.email, password=account.password)
            )
        return Account.model_validate(row)

    async def get_account(self, email: str) -> Account:
        """Look up an account by e-mail.

        Raises:
            DatabaseQueryError: If no account has this e-mail.
        """
        with _query_errors("get_account"):
            row = await self._accounts.find_one_by(email=email)
        if row is None:
            raise DatabaseQueryError()
        return Account.model_validate(row)

    async def get_questions(self, limit: int | None, offset: int) -> list[Question]:
        """List questions ordered by id."""
        with _query_errors("get_questions"):
            rows = await self._questions.get_all(skip=offset, limit=limit)
        return [Question.model_validate(row) for row in rows]

    async def add_question(self, question: NewQuestion) -> Question:
        """Store a new question."""
        with _query_errors("add_question"):
            row = await self._questions.create(
                QuestionModel(
                    title=question.title,
                    content=question.content,
                    tags=question.tags,
                )
            )
        return Question.model_validate(row)

    async def update_question(
        self, question: NewQuestion, question_id: int
    ) -> Question:
        """Replace title, content and tags of question ``question_id``.

        Raises:
            DatabaseQueryError: If the question doesn't exist.
        """
        with _query_errors("update_question"):
            row = await self._questions.update(
                question_id,
                {
                    "title": question.title,
                    "content": question.content,
                    "tags": question.tags,
                },
            )
        if row is None:
            raise DatabaseQueryError()
        return Question.model_validate(row)

    async def delete_question(self, question_id: int) -> None:
        """Delete question ``question_id`` and its answers.

        Raises:
            DatabaseQueryError: If the question doesn't exist.
        """
        with _query_errors("delete_question"):
            deleted = await self._questions.delete(question_id)
        if not deleted:
            raise DatabaseQueryError()

    async def add_answer(self, answer: NewAnswer) -> Answer:
        """Store an answer. Fails if the question doesn't exist."""
        with _query_errors("add_answer"):
            row = await self._answers.create(
                AnswerModel(content=answer.content, question_id=answer.question_id)
            )
        return Answer.model_validate(row)


def get_store(session: DatabaseSession) -> ForumStore:
    """Provide a ForumStore bound to the request's database session."""
    return ForumStore(session)


Store = Annotated[ForumStore, Depends(get_store)]
