"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from bestdex.lens.facade import BestDexLens
from bestdex.lens.state import parse_state
from tests.helpers.constants import DAI, POSITION_MANAGER, USDC, WETH

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


def load_state_fixture(name: str) -> dict[str, Any]:
    """Load a lens state document fixture by name (e.g., "lens_state")."""
    with open(FIXTURES_DIR / f"{name}.json") as f:
        return json.load(f)


@pytest.fixture
def lens_document() -> dict[str, Any]:
    """Two WETH/USDC constant-product venues, one position, one oracle rate."""
    return {
        "blockNumber": 19_000_000,
        "venues": [
            {
                "id": "uniswap",
                "kind": "constant_product",
                "pools": [
                    {
                        "kind": "constant_product",
                        "token0": WETH,
                        "token1": USDC,
                        "reserve0": str(1000 * 10**18),
                        "reserve1": str(2_000_000 * 10**6),
                    }
                ],
            },
            {
                "id": "sushiswap",
                "kind": "constant_product",
                "gasUnits": 70_000,
                "pools": [
                    {
                        "kind": "constant_product",
                        "token0": WETH,
                        "token1": USDC,
                        "reserve0": str(500 * 10**18),
                        "reserve1": str(1_000_000 * 10**6),
                    }
                ],
            },
        ],
        "positions": [
            {
                "id": 0,
                "soldAsset": USDC,
                "positionAsset": WETH,
                "positionAmount": str(10**18),
                "debt": str(1000 * 10**6),
                "depositAsset": USDC,
                "depositAmount": str(500 * 10**6),
            }
        ],
        "oracleRates": [{"assetA": DAI, "assetB": USDC, "rate": str(10**6)}],
        "positionManagers": [POSITION_MANAGER],
    }


@pytest.fixture
def lens(lens_document: dict[str, Any]) -> BestDexLens:
    """Lens over the lens_document state."""
    return BestDexLens.from_state(parse_state(lens_document))
