"""Text-generation client."""
