"""Single-hop path encoding per venue kind.

The encoded path is what a venue adapter needs to execute the chosen
route later; the router itself never interprets it.

- constant product / aggregator: abi.encode(address[] path)
- stable swap / weighted pool: abi.encode(address[] path, bytes32 poolSelector)
- concentrated liquidity: packed tokenIn (20) | fee uint24 (3) | tokenOut (20)
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]

from bestdex.constants import ZERO_BYTES32
from bestdex.models.types import normalize_address
from bestdex.venues.base import VenueKind


def _address_bytes(address: str) -> bytes:
    return bytes.fromhex(normalize_address(address, validate=True)[2:])


def encode_address_path(asset_in: str, asset_out: str) -> str:
    encoded = encode(["address[]"], [[_address_bytes(asset_in), _address_bytes(asset_out)]])
    return "0x" + encoded.hex()


def encode_pool_path(asset_in: str, asset_out: str, pool_selector: str = ZERO_BYTES32) -> str:
    encoded = encode(
        ["address[]", "bytes32"],
        [[_address_bytes(asset_in), _address_bytes(asset_out)], bytes.fromhex(pool_selector[2:])],
    )
    return "0x" + encoded.hex()


def encode_packed_v3_path(asset_in: str, fee: int, asset_out: str) -> str:
    """Packed single-hop path, as UniswapV3 routers expect.

    Raises:
        ValueError: If fee does not fit in uint24
    """
    if not 0 <= fee < 2**24:
        raise ValueError(f"Fee {fee} does not fit in uint24")
    packed = _address_bytes(asset_in) + fee.to_bytes(3, "big") + _address_bytes(asset_out)
    return "0x" + packed.hex()


def encode_path(
    kind: VenueKind,
    asset_in: str,
    asset_out: str,
    *,
    fee: int = 0,
    pool_selector: str = ZERO_BYTES32,
) -> str:
    """Encode a single-hop path for a venue of the given kind."""
    if kind == VenueKind.CONCENTRATED_LIQUIDITY:
        return encode_packed_v3_path(asset_in, fee, asset_out)
    if kind in (VenueKind.STABLE_SWAP, VenueKind.WEIGHTED_POOL):
        return encode_pool_path(asset_in, asset_out, pool_selector)
    return encode_address_path(asset_in, asset_out)


__all__ = [
    "encode_address_path",
    "encode_pool_path",
    "encode_packed_v3_path",
    "encode_path",
]
