"""
Persistence adapters.

Services depend on the repository rather than opening SQLAlchemy sessions
themselves.
"""
