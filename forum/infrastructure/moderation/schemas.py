"""Wire models of the bad words filtering API."""

from pydantic import BaseModel, ConfigDict, Field


class BadWord(BaseModel):
    """One profanity match reported by the filter."""

    model_config = ConfigDict(populate_by_name=True)

    original: str
    word: str
    deviations: int
    info: int
    replaced_len: int = Field(alias="replacedLen")


class BadWordsResponse(BaseModel):
    """Successful filter result."""

    content: str
    bad_words_total: int
    bad_words_list: list[BadWord]
    censored_content: str


class APIErrorResponse(BaseModel):
    """Error envelope returned with non-2xx statuses."""

    message: str
