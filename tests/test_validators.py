import pytest

from errors import BadRequest
from validators import parse_movies_query


def test_empty_query_is_valid():
    query = parse_movies_query({})
    assert query.limit is None
    assert query.rating is None


def test_rating_is_parsed_from_json():
    query = parse_movies_query({"rating": "[3,7]", "limit": "10", "offset": "0"})
    assert query.rating == (3, 7)
    assert query.limit == 10
    assert query.offset == 0


def test_malformed_rating_fails_with_parse_error():
    with pytest.raises(BadRequest):
        parse_movies_query({"rating": "[3,"})


@pytest.mark.parametrize("rating", ["[1]", "[1,2,3]", "[-1,5]", "[3,11]", '["a",2]'])
def test_rating_must_be_two_numbers_in_range(rating):
    with pytest.raises(BadRequest):
        parse_movies_query({"rating": rating})


def test_sorting_values_are_checked():
    with pytest.raises(BadRequest):
        parse_movies_query({"sortingBy": "genre", "sortingDirection": "ASC"})
    with pytest.raises(BadRequest):
        parse_movies_query({"sortingBy": "title", "sortingDirection": "UP"})


@pytest.mark.parametrize(
    "params", [{"sortingBy": "title"}, {"sortingDirection": "DESC"}]
)
def test_sorting_params_come_together(params):
    with pytest.raises(BadRequest) as info:
        parse_movies_query(params)
    assert info.value.message == "Both sorting params must be provided."


def test_sorting_pair_is_accepted():
    query = parse_movies_query({"sortingBy": "rating", "sortingDirection": "DESC"})
    assert query.sorting_by == "rating"
    assert query.sorting_direction == "DESC"


def test_first_failure_wins():
    # bad rating is reported, the sorting mismatch is never reached
    with pytest.raises(BadRequest) as info:
        parse_movies_query({"rating": "oops", "sortingBy": "title"})
    assert info.value.message != "Both sorting params must be provided."


def test_unknown_params_are_rejected():
    with pytest.raises(BadRequest):
        parse_movies_query({"director": "Nolan"})


@pytest.mark.parametrize(
    "params",
    [{"genre": ""}, {"publishingCountry": ""}, {"publishingYear": "100000"}, {"publishingYear": "-5"}],
)
def test_empty_filters_and_out_of_range_years_are_rejected(params):
    with pytest.raises(BadRequest):
        parse_movies_query(params)
