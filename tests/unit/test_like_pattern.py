"""Unit tests for LIKE search patterns."""
from database import like_pattern


def test_plain_term_is_wrapped():
    assert like_pattern("anna") == "%anna%"


def test_wildcards_and_escape_char_are_escaped():
    assert like_pattern("50%_off\\") == "%50\\%\\_off\\\\%"
