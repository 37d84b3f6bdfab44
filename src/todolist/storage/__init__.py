"""
Task storage backends.

- memory_repo.py: dict + RWLock, no durability
- file_repo.py: JSON snapshot, write-temp-then-rename on every change
- sqlite_repo.py: SQLite table with status/priority/due/created indexes
- factory.py: sqlite -> file -> memory fallback chain
"""
