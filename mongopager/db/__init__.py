"""MongoDB access for mongopager."""

from .connection import MongoManager, mongo_manager, get_database
from .executor import MongoExecutor, find_paginated

__all__ = [
    "MongoManager",
    "mongo_manager",
    "get_database",
    "MongoExecutor",
    "find_paginated"
]
