"""
Service layer for business logic.

This layer separates marker rules (validation, normalization, statistics)
from HTTP request handling and from file persistence.
"""
