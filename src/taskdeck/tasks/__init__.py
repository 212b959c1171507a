"""
Task subsystem.

Components:
- dates.py: day-boundary helpers (local midnight anchors)
- task_models.py: data structures (Task, FilterCriteria, TaskStats, enums)
- task_query.py: pure search / filter / sort / group / stats engine
- catalog.py: fixed category and priority catalogs, progress
- task_store.py: SQLite-backed local task store
"""
