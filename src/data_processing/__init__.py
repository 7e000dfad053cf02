"""Collectors for news feeds and onchain analytics."""
