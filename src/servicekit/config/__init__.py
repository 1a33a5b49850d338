"""Configuration layer — settings and logging setup."""
