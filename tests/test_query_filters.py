from werkzeug.datastructures import MultiDict

from ella_rises.models import SurveyResult, User
from ella_rises.services.query_filters import (
    date_part_clause,
    flag_in_clause,
    full_name_clause,
    normalize_sort_order,
    number_in_clause,
    param_to_array,
    parse_ints,
    parse_numbers,
    presence_clause,
    read_array,
)


def test_param_to_array_defaults_to_all():
    assert param_to_array(None) == ["all"]
    assert param_to_array("") == ["all"]
    assert param_to_array([]) == ["all"]


def test_param_to_array_wraps_scalars_and_keeps_lists():
    assert param_to_array("Provo") == ["Provo"]
    assert param_to_array(["Provo", "Orem"]) == ["Provo", "Orem"]


def test_read_array_handles_repeated_and_bracketed_params():
    assert read_array(MultiDict([("city", "Provo"), ("city", "Orem")]), "city") == [
        "Provo",
        "Orem",
    ]
    assert read_array(MultiDict([("city[]", "Lehi")]), "city") == ["Lehi"]
    assert read_array(MultiDict(), "city") == ["all"]
    assert read_array({"city": "Provo"}, "city") == ["Provo"]


def test_parse_ints_drops_invalid_values():
    assert parse_ints(["3", " 4 ", "abc", None, "5.5"]) == [3, 4]


def test_parse_numbers_keeps_integral_values_as_ints():
    assert parse_numbers(["5", "4.5", "nope", "NaN"]) == [5, 4.5]


def test_parse_numbers_drops_values_beyond_the_digit_limit():
    assert parse_numbers(["1e3000000", "-1e400", "12", "4.5"], max_integer_digits=2) == [12, 4.5]
    assert parse_numbers(["123"], max_integer_digits=2) == []
    assert parse_numbers(["1e-3000000"]) == [0.0]


def test_overall_score_clause_is_bounded_by_column_precision():
    assert number_in_clause(SurveyResult.survey_overall_score, ["1e3000000"]) is None
    assert number_in_clause(SurveyResult.survey_overall_score, ["4.75"]) is not None


def test_presence_clause_is_ternary():
    assert presence_clause(User.user_id, ["all"]) is None
    assert presence_clause(User.user_id, ["Yes", "No"]) is None
    assert presence_clause(User.user_id, ["Maybe"]) is None
    assert presence_clause(User.user_id, ["Yes"]) is not None
    assert presence_clause(User.user_id, ["No"]) is not None


def test_date_part_clause_ignores_unparseable_values():
    assert date_part_clause("month", User.participant_dob, ["abc"]) is None
    assert date_part_clause("month", User.participant_dob, ["all", "3"]) is None
    assert date_part_clause("month", User.participant_dob, ["3"]) is not None


def test_flag_clause_needs_numeric_values():
    assert flag_in_clause(User.user_id, ["yes"]) is None
    assert flag_in_clause(User.user_id, ["1"]) is not None


def test_full_name_clause_with_blank_term():
    assert full_name_clause(User.participant_first_name, User.participant_last_name, "  ") is None


def test_normalize_sort_order():
    assert normalize_sort_order("desc") == "desc"
    assert normalize_sort_order("DESC") == "asc"
    assert normalize_sort_order(None) == "asc"
