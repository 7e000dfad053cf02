"""Prompt builders and the digest runner."""
