"""
Application services (use cases).

Routers call these services instead of touching the repository directly.
"""
