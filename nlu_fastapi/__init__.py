"""NLU FastAPI service."""
