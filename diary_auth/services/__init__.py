"""Account security services."""
