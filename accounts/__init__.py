"""User accounts REST API (signup, login, profile CRUD and password flows)."""
