import pytest

from cpsigner.utils import validation as v


def test_password_validation():
    assert v.is_valid_password("abcdefgh")
    assert not v.is_valid_password("abcdefg")
    assert not v.is_valid_password(None)
    assert v.validate_password("abcdefgh") == "abcdefgh"
    with pytest.raises(v.ValidationError, match="at least 8 characters"):
        v.validate_password("short")


def test_require_password():
    assert v.require_password("x") == "x"
    with pytest.raises(v.ValidationError, match="Password is required"):
        v.require_password(None)
    with pytest.raises(v.ValidationError):
        v.require_password("")


def test_wif_length_validation():
    assert v.is_valid_wif("5" * 51)
    assert v.is_valid_wif("K" * 52)
    assert not v.is_valid_wif("K" * 50)
    with pytest.raises(v.ValidationError, match="Invalid WIF"):
        v.validate_wif("K" * 53)


def test_address_presence():
    assert v.validate_address(" 1abc ") == "1abc"
    with pytest.raises(v.ValidationError):
        v.validate_address("   ")
    with pytest.raises(v.ValidationError):
        v.validate_address(None)


def test_account_name_trimmed():
    assert v.validate_account_name("  Savings ") == "Savings"
    with pytest.raises(v.ValidationError, match="cannot be empty"):
        v.validate_account_name("  ")


def test_index_validation():
    items = ["a", "b"]
    assert v.validate_index(1, items) == 1
    for bad in (-1, 2, "0", True, None, 1.0):
        with pytest.raises(v.ValidationError):
            v.validate_index(bad, items)


def test_index_validation_custom_error():
    class Custom(Exception):
        pass

    with pytest.raises(Custom):
        v.validate_index(5, [], Custom)


def test_request_id_and_hex():
    assert v.validate_request_id("req-1") == "req-1"
    with pytest.raises(v.ValidationError):
        v.validate_request_id("")
    assert v.is_valid_hex("00ff")
    assert not v.is_valid_hex("0ff")
    assert not v.is_valid_hex("zz")
