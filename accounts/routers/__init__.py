"""
FastAPI routers grouped by domain.

Each module exposes an APIRouter that is included by ``accounts.app``.
"""
