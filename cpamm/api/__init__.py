"""HTTP API for the AMM core."""
