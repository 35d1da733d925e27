"""Question, answer and pagination records."""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from forum.core.exceptions import MissingParametersError, ParseError

type QuestionId = int
type AnswerId = int


class NewQuestion(BaseModel):
    """Payload for creating a question."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    tags: list[str] | None = None


class Question(NewQuestion):
    """A stored question."""

    model_config = ConfigDict(from_attributes=True)

    id: QuestionId


class NewAnswer(BaseModel):
    """Payload for answering a question."""

    content: str = Field(..., min_length=1)
    question_id: QuestionId


class Answer(NewAnswer):
    """A stored answer."""

    model_config = ConfigDict(from_attributes=True)

    id: AnswerId


class Pagination(BaseModel):
    """Window over the question list. ``limit=None`` means no upper bound."""

    limit: int | None = None
    offset: int = 0


def _parse_non_negative(params: Mapping[str, str], name: str) -> int:
    raw = params[name]
    try:
        value = int(raw)
    except ValueError as e:
        raise ParseError(name, cause=e) from e
    if value < 0:
        raise ParseError(name)
    return value


def extract_pagination(params: Mapping[str, str]) -> Pagination:
    """Build a Pagination from raw query parameters.

    No parameters at all yields the default window. Otherwise both ``limit``
    and ``offset`` are required.

    Args:
        params: Query string parameters.

    Returns:
        Pagination: The requested window.

    Raises:
        MissingParametersError: If only one of ``limit``/``offset`` is present.
        ParseError: If a value is not a non-negative integer.
    """
    if not params:
        return Pagination()

    if "limit" not in params or "offset" not in params:
        raise MissingParametersError(
            {"received": sorted(k for k in params if k in {"limit", "offset"})}
        )

    return Pagination(
        limit=_parse_non_negative(params, "limit"),
        offset=_parse_non_negative(params, "offset"),
    )
