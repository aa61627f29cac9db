"""Persistence implementations for techlearn_auth, grouped by technology."""
