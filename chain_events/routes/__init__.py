"""HTTP routers of the /v0 API."""
