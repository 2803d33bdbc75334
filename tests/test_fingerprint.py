"""Tests for the visitor fingerprint hash."""
from sitestore.fingerprint import fingerprint, rolling_hash


def test_rolling_hash_matches_string_hash_code():
    assert rolling_hash("") == 0
    assert rolling_hash("a") == 97
    assert rolling_hash("ab") == 97 * 31 + 98
    assert rolling_hash("hello") == 99162322


def test_rolling_hash_wraps_to_signed_32_bits():
    assert rolling_hash("polygenelubricants") == -(2 ** 31)


def test_fingerprint_is_base36_of_absolute_hash():
    assert fingerprint("a", "") == "2p"
    assert fingerprint("a", "b") == "2e9"
    assert int(fingerprint("polygene", "lubricants"), 36) == 2 ** 31


def test_fingerprint_is_stable_and_concatenates_inputs():
    ua = "Mozilla/5.0 (X11; Linux x86_64)"

    assert fingerprint("203.0.113.7", ua) == fingerprint("203.0.113.7", ua)
    assert fingerprint("203.0.113.7", ua) == fingerprint("203.0.113.", "7" + ua)
    assert fingerprint("203.0.113.7", ua) != fingerprint("203.0.113.8", ua)


def test_fingerprint_tolerates_missing_inputs():
    assert fingerprint(None, None) == "0"
    assert set(fingerprint("::1", "curl/8.0")) <= set("0123456789abcdefghijklmnopqrstuvwxyz")
