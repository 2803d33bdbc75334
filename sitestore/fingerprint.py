# sitestore/fingerprint.py
"""
Approximate visitor identification for analytics de-duplication.

The fingerprint is a 32-bit rolling hash (h = h*31 + c, wrapping) of the
client address followed by the User-Agent, rendered in base 36. It is not
cryptographic and not stable across address changes; two different
visitors may share a value. Never use it for authentication.
"""

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def rolling_hash(text: str) -> int:
    # iterate UTF-16 code units so values match browser-side String hashing
    data = text.encode("utf-16-be")
    h = 0
    for i in range(0, len(data), 2):
        unit = (data[i] << 8) | data[i + 1]
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def fingerprint(remote_address, user_agent) -> str:
    return _to_base36(abs(rolling_hash((remote_address or "") + (user_agent or ""))))
