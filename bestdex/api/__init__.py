"""HTTP API for the router."""
