"""Protocol constants for the best-execution router.

Centralizes well-known values, fixed-point scales and gas defaults.
"""

# Zero address - never a valid asset or collaborator
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Empty ancillary data (bytes32(0)), used when a venue needs no pool selector
ZERO_BYTES32 = "0x" + "00" * 32

# 18-decimal fixed point scale used for prices, weights, fees and oracle rates
WAD = 10**18

# Amplification precision for stable-swap pools (amp is stored multiplied by this)
AMP_PRECISION = 1000

# Gas estimation constants per swap (in gas units)
CONSTANT_PRODUCT_SWAP_GAS = 60_000
CONCENTRATED_LIQUIDITY_SWAP_GAS = 106_000
STABLE_SWAP_GAS = 183_520
WEIGHTED_POOL_SWAP_GAS = 88_892
# Aggregators route through several pools plus their own dispatch overhead
AGGREGATOR_SWAP_GAS = 250_000
