"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority) + transitions
- errors.py: error taxonomy shared by services and storage
- task_service.py: validated single-task operations and derived date queries
- task_query.py: filter / intersect / sort pipeline pieces
- task_api.py: surface consumed by shells
"""
