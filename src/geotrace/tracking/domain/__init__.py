"""Domain layer for the tracking context."""
