"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, FilterPredicate, ...)
- task_filter.py: search/status/priority filter + completion duration formatting
- task_board.py: cached task list + current filter (the list view)
- composer.py: create/edit form with fail-soft AI assistance
- analytics.py: completion statistics, chart series, AI insight
"""
