"""Account security core for the student diary."""
