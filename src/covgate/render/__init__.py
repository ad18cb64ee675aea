"""Presentation of pipeline results (console, HTML, JSON)."""
