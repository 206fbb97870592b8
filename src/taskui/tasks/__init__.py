"""
Task subsystem.

Components:
- task_models.py: the Task record, the "new task" sentinel id, timestamp codec
- task_store.py: SQLite-backed storage with the visibility filter and upsert
"""
