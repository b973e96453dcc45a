import string

import pytest

from ledger_classify.sanitize import letters_only, sanitize

_KEPT = set(string.ascii_letters + string.digits + "*:/.-")


def _is_subsequence(small: str, big: str) -> bool:
    it = iter(big)
    return all(ch in it for ch in small)


@pytest.mark.parametrize(
    "raw",
    [
        "AMAZON.COM  ",
        "SQ *BLUE BOTTLE 12/03",
        "Café — Nöel #42 (refund)",
        "\tLYFT   *RIDE TUE 8PM\n",
        "",
    ],
)
def test_sanitize_keeps_allowed_chars_in_order(raw):
    out = sanitize(raw)
    assert set(out) <= _KEPT
    assert _is_subsequence(out, raw)
    assert out == "".join(ch for ch in raw if ch in _KEPT)


def test_sanitize_removes_whitespace_for_dedup_keys():
    assert sanitize("AMAZON.COM  ") == sanitize("AMAZON.COM") == "AMAZON.COM"
    assert sanitize("PAYPAL *EBAY 01/02-x") == "PAYPAL*EBAY01/02-x"


def test_sanitize_drops_non_ascii_letters():
    assert sanitize("Crème brûlée") == "Crmebrle"


def test_letters_only_strips_digits_and_punctuation():
    assert letters_only("STARBUCKS #123") == "STARBUCKS"
    assert letters_only("STARBUCKS #456") == "STARBUCKS"
    assert letters_only("SQ *CAFE 12/03") == "SQCAFE"
    assert letters_only("1234 -- ##") == ""
