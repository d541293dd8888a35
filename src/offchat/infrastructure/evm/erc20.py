"""Minimal ERC-20 call encoding plus unit conversion helpers."""
from __future__ import annotations

import re

from eth_abi import decode, encode
from eth_utils import encode_hex, function_signature_to_4byte_selector, to_checksum_address

BALANCE_OF_SELECTOR = function_signature_to_4byte_selector("balanceOf(address)")
TRANSFER_SELECTOR = function_signature_to_4byte_selector("transfer(address,uint256)")

_AMOUNT_RE = re.compile(r"(?P<whole>\d*)(?:\.(?P<frac>\d*))?")


def encode_balance_of(owner: str) -> str:
    return encode_hex(BALANCE_OF_SELECTOR + encode(["address"], [to_checksum_address(owner)]))


def encode_transfer(to: str, amount: int) -> str:
    return encode_hex(
        TRANSFER_SELECTOR + encode(["address", "uint256"], [to_checksum_address(to), amount])
    )


def decode_uint256(data: bytes) -> int:
    (value,) = decode(["uint256"], data)
    return int(value)


def parse_units(amount: str, decimals: int) -> int:
    """Convert a decimal string such as ``"1.5"`` to base units.

    Exact integer arithmetic; raises ValueError for malformed, non-positive
    or over-precise amounts.
    """
    match = _AMOUNT_RE.fullmatch(str(amount).strip())
    if match is None or not (match["whole"] or match["frac"]):
        raise ValueError(f"Invalid amount: {amount!r}")
    frac = (match["frac"] or "").rstrip("0")
    if len(frac) > decimals:
        raise ValueError(f"Too many decimal places for {decimals}-decimal token: {amount!r}")
    value = int(match["whole"] or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")
    if value <= 0:
        raise ValueError(f"Invalid amount: {amount!r}")
    return value


def format_units(value: int, decimals: int) -> str:
    """Inverse of parse_units; always keeps at least one fractional digit."""
    whole, frac = divmod(value, 10**decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{whole}.{frac_text or '0'}"
