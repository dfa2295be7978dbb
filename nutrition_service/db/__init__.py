"""
Database module initialization
"""

from .indexes import create_indexes
from .mongodb import Database

__all__ = ["Database", "create_indexes"]
