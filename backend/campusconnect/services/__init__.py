"""Domain services. Each takes an open Session and raises typed errors from ``..exceptions``."""
