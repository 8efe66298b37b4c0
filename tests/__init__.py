"""Tests for the NLU FastAPI service."""
