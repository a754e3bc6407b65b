"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, ClearMode)
- task_persistence.py: key-value backends + JSON round-trip of the collection
- task_store.py: in-memory collection, the only mutator of task state
- task_filter.py: all / active / completed view subsets
- task_icons.py: ordered keyword rules -> category icon
"""
