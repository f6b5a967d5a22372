"""
Adapters layer - Snapshot sources (data store API, snapshot files).
"""

from .snapshot_file import SnapshotFile
from .supabase_client import SupabaseClient

__all__ = ["SnapshotFile", "SupabaseClient"]
