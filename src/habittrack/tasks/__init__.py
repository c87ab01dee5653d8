"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft, enums)
- errors.py: errors reported by the store
- task_store.py: authoritative in-memory collection + persistence/reminder hooks
- task_views.py: pure filtered/sorted views and statistics
"""
