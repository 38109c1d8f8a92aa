"""HTTP-слой refpoints (FastAPI)."""
