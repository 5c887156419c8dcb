"""Client configuration (environment-based provider)."""
