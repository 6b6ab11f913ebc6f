"""Configuration package - environment-backed defaults for the relay."""
