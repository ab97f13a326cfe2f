"""Account recovery API."""
