"""Infrastructure adapters for the user store."""
