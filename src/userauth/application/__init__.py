"""Application layer: use cases built on the domain and the user store."""
