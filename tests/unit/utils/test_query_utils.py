import pytest

from app.utils.query_utils import escape_like, wildcard_to_like


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("new_user_", "new\\_user\\_"),
        ("50%", "50\\%"),
        ("a\\b", "a\\\\b"),
        ("plain", "plain"),
    ],
)
def test_escape_like_quotes_metacharacters(raw: str, expected: str) -> None:
    assert escape_like(raw) == expected


@pytest.mark.unit
def test_wildcard_to_like_only_expands_outer_asterisks() -> None:
    assert wildcard_to_like("*a_b*") == "%a\\_b%"
    assert wildcard_to_like("*%*") == "%\\%%"
    assert wildcard_to_like("bob") == "bob"
    assert wildcard_to_like("a*b*") == "a*b%"
