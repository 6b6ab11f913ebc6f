"""Feature packages: reverse proxy and reload notifications."""
