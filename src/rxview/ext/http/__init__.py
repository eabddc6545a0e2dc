"""Starlette app exposing the tool endpoint and drug content routes."""

from .app import build_service, create_app, create_app_from_settings, serve_http, split_identifier

__all__ = ["create_app", "create_app_from_settings", "build_service", "serve_http", "split_identifier"]
