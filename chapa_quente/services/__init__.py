"""Service layer: each function takes the request Session explicitly."""
