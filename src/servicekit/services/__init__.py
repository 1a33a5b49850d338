"""Service layer — the operation lifecycle every business operation builds on.

Services may import from domain, validation, and config.
"""
