"""Session-state key constants."""
