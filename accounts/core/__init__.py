"""
Core utilities shared across the accounts API.

This package hosts configuration, error types, password hashing, token
signing and the email adapter. Routers and services depend on these
primitives instead of reading the environment or talking to SMTP directly.
"""
