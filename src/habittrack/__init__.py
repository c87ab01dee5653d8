"""
HabitTrack: a single-user to-do list with local persistence, due-date
reminders and a task-count widget.
"""

__version__ = "0.1.0"
