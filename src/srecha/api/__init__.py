"""HTTP access boundary (FastAPI)."""
