"""
Database migrations and operator commands package
"""
from .admin_role import grant_admin_role, create_account

__all__ = [
    "grant_admin_role",
    "create_account",
]
