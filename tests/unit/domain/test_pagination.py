"""Unit tests for query string pagination."""

import pytest

from forum.core.exceptions import MissingParametersError, ParseError
from forum.domain.questions import Pagination, extract_pagination


@pytest.mark.unit
class TestExtractPagination:
    """Parsing limit and offset."""

    def test_no_parameters_means_everything(self) -> None:
        """An empty query string selects all questions."""
        assert extract_pagination({}) == Pagination(limit=None, offset=0)

    def test_both_parameters(self) -> None:
        """Both values are parsed as integers."""
        assert extract_pagination({"limit": "10", "offset": "20"}) == Pagination(
            limit=10, offset=20
        )

    def test_zero_is_allowed(self) -> None:
        """A zero limit is a valid, empty window."""
        assert extract_pagination({"limit": "0", "offset": "0"}).limit == 0

    def test_unrelated_parameters_are_ignored(self) -> None:
        """Other keys don't affect the window once both are present."""
        params = {"limit": "1", "offset": "2", "sort": "title"}

        assert extract_pagination(params) == Pagination(limit=1, offset=2)

    @pytest.mark.parametrize(
        ("params", "received"),
        [
            ({"limit": "10"}, ["limit"]),
            ({"offset": "5"}, ["offset"]),
            ({"sort": "title"}, []),
        ],
    )
    def test_partial_parameters_are_missing(
        self, params: dict[str, str], received: list[str]
    ) -> None:
        """One without the other is rejected."""
        with pytest.raises(MissingParametersError) as exc_info:
            extract_pagination(params)

        assert exc_info.value.context == {"received": received}

    @pytest.mark.parametrize(
        ("params", "parameter"),
        [
            ({"limit": "ten", "offset": "0"}, "limit"),
            ({"limit": "10", "offset": "1.5"}, "offset"),
            ({"limit": "-1", "offset": "0"}, "limit"),
            ({"limit": "10", "offset": "-3"}, "offset"),
            ({"limit": "", "offset": "0"}, "limit"),
        ],
    )
    def test_invalid_values_are_parse_errors(
        self, params: dict[str, str], parameter: str
    ) -> None:
        """Non-integers and negatives name the offending parameter."""
        with pytest.raises(ParseError) as exc_info:
            extract_pagination(params)

        assert exc_info.value.context == {"parameter": parameter}
