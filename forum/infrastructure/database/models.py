"""ORM models for accounts, questions and answers."""

from sqlalchemy import BigInteger, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from forum.infrastructure.database.base import BaseModel


class AccountModel(BaseModel):
    """A registered account. ``password`` holds the encoded Argon2 hash."""

    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)


class QuestionModel(BaseModel):
    """A question with optional tags."""

    __tablename__ = "questions"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)


class AnswerModel(BaseModel):
    """An answer to a question. Answers go away with their question."""

    __tablename__ = "answers"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    question_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
