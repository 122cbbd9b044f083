"""Shared helpers for the tournament platform services and jobs."""
