"""
Content packs: models, loading and pool construction.
"""

from .loader import ContentLibrary, build_pool
from .models import ContentPack, PackIndexEntry, PoolEntry, TemplateEntry

__all__ = [
    "ContentLibrary",
    "ContentPack",
    "PackIndexEntry",
    "PoolEntry",
    "TemplateEntry",
    "build_pool",
]
