import pytest

from dbfunc.utils.text import to_delimited_string


@pytest.mark.parametrize(
    ("values", "expected"),
    [(None, ""), ([], ""), ([7], "7"), ([1, 2, 3], "1, 2, 3"), (range(3), "0, 1, 2")],
)
def test_to_delimited_string_default_delimiter(values: object, expected: str) -> None:
    assert to_delimited_string(values) == expected  # type: ignore[arg-type]


def test_to_delimited_string_custom_delimiter() -> None:
    assert to_delimited_string([10, 20], delimiter=",") == "10,20"
