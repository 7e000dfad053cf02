"""Outbound posting connectors."""
