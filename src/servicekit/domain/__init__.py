"""Domain layer — naming rules shared by the service core.

This layer depends only on stdlib.
It must never import from services, validation, or config.
"""
