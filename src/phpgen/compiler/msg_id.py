"""Deterministic message IDs.

Message IDs key translations, so they must be identical across compiler
runs, platforms and implementations. The ID is a 64-bit fingerprint made
of two Jenkins lookup2 ``hash32`` values over the UTF-8 encoded message
content, masked to a non-negative 63-bit integer.

Example:
    >>> msg_id("Hello {NAME}") == msg_id("Hello {NAME}")
    True
"""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_MAX_ID = 0x7FFFFFFFFFFFFFFF

_GOLDEN_RATIO = 0x9E3779B9
_LO_SEED = 102072


def _mix(a: int, b: int, c: int) -> tuple[int, int, int]:
    a = (a - b - c) & _MASK32
    a ^= c >> 13
    b = (b - c - a) & _MASK32
    b ^= (a << 8) & _MASK32
    c = (c - a - b) & _MASK32
    c ^= b >> 13
    a = (a - b - c) & _MASK32
    a ^= c >> 12
    b = (b - c - a) & _MASK32
    b ^= (a << 16) & _MASK32
    c = (c - a - b) & _MASK32
    c ^= b >> 5
    a = (a - b - c) & _MASK32
    a ^= c >> 3
    b = (b - c - a) & _MASK32
    b ^= (a << 10) & _MASK32
    c = (c - a - b) & _MASK32
    c ^= b >> 15
    return a, b, c


def hash32(data: bytes, seed: int) -> int:
    """Jenkins lookup2 hash of ``data`` as an unsigned 32-bit integer."""
    a = b = _GOLDEN_RATIO
    c = seed & _MASK32
    length = len(data)
    i = 0
    while i + 12 <= length:
        a = (a + int.from_bytes(data[i : i + 4], "little")) & _MASK32
        b = (b + int.from_bytes(data[i + 4 : i + 8], "little")) & _MASK32
        c = (c + int.from_bytes(data[i + 8 : i + 12], "little")) & _MASK32
        a, b, c = _mix(a, b, c)
        i += 12

    c = (c + length) & _MASK32
    tail = data[i:]
    # Tail bytes 8-10 go to c shifted past its low byte, which holds the length.
    for offset, byte in enumerate(tail):
        if offset < 4:
            a = (a + (byte << (8 * offset))) & _MASK32
        elif offset < 8:
            b = (b + (byte << (8 * (offset - 4)))) & _MASK32
        else:
            c = (c + (byte << (8 * (offset - 7)))) & _MASK32
    return _mix(a, b, c)[2]


def _to_signed64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value >> 63 else value


def fingerprint(text: str) -> int:
    """Signed 64-bit fingerprint of ``text``."""
    data = text.encode("utf-8")
    hi = hash32(data, 0)
    lo = hash32(data, _LO_SEED)
    if hi == 0 and lo in (0, 1):
        hi ^= 0x130F9BEF
        lo ^= 0x94A0A928
    return _to_signed64((hi << 32) | lo)


def msg_id(content: str, meaning: str | None = None) -> int:
    """Message ID for ``content``, optionally disambiguated by ``meaning``."""
    fp = fingerprint(content)
    if meaning:
        fp = _to_signed64((fp << 1) + (1 if fp < 0 else 0) + fingerprint(meaning))
    return fp & _MAX_ID
