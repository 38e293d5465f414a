"""Domain layer: user accounts and shared helpers."""
