"""
Core models package
"""

from .user_info.user import User

__all__ = [
    'User',
]
