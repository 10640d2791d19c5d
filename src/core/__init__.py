"""Configuration, exceptions and rate limiting."""
