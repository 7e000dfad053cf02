"""Pure analysis over collected data."""
