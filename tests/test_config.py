# tests/test_config.py
"""Tests for environment-driven settings."""

from servicedesk.core.config import Settings


def test_cors_defaults_to_frontend_url(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.setenv("FRONTEND_URL", "https://desk.example.com")
    monkeypatch.setenv("NEXT_PUBLIC_API_URL", "https://api.example.com")

    assert Settings().cors_origins == ["https://desk.example.com"]


def test_cors_falls_back_to_local_dashboard(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.delenv("FRONTEND_URL", raising=False)
    monkeypatch.setenv("NEXT_PUBLIC_API_URL", "https://api.example.com")

    assert Settings().cors_origins == ["http://localhost:3000"]


def test_cors_origins_list_wins(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://desk.example.com")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, https://b.example.com,")

    assert Settings().cors_origins == ["https://a.example.com", "https://b.example.com"]
