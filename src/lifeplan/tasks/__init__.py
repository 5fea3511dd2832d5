"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskType, Priority, Recurrence)
- timeframes.py: dates, weekdays and time-frame keys
- task_store.py: in-memory store + persistence + derived views
- board.py: drag/drop moves composed from store operations
- task_api.py: small high-level helpers used by the rest of the app
- analytics.py: completion rates, streaks and achievements
"""
