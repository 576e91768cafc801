"""Interfaces layer for eventcraft: the Typer CLI and the FastAPI router."""
