import pytest

from disint.interactions import OptionValue


def test_string_variant_accessors():
    value = OptionValue("hello")
    assert value.is_string is True
    assert value.is_int is False
    assert value.try_as_str() == "hello"
    assert value.try_as_int() is None
    assert value.as_str() == "hello"
    with pytest.raises(TypeError):
        value.as_int()


def test_int_variant_accessors():
    value = OptionValue(42)
    assert value.is_int is True
    assert value.try_as_int() == 42
    assert value.try_as_str() is None
    assert value.to_json() == 42
    with pytest.raises(TypeError):
        value.as_str()


def test_equality_respects_variant():
    assert OptionValue("1") == "1"
    assert OptionValue(1) == 1
    assert OptionValue("1") != 1
    assert OptionValue(1) != "1"
    assert OptionValue(1) != True  # noqa: E712
    assert OptionValue(1) == OptionValue(1)
    assert OptionValue("1") != OptionValue(1)
    assert len({OptionValue(1), OptionValue(1), OptionValue("1")}) == 2


@pytest.mark.parametrize("raw", [True, 1.5, None, ["a"], {"a": 1}])
def test_rejects_unsupported_types(raw: object):
    with pytest.raises(TypeError):
        OptionValue(raw)  # type: ignore[arg-type]


def test_str_and_repr():
    assert str(OptionValue(7)) == "7"
    assert repr(OptionValue("x")) == "OptionValue('x')"
