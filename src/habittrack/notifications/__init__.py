"""
Reminder subsystem.

Components:
- center.py: in-process notification center (pending one-shot requests)
- reminders.py: due-date -> reminder scheduling policy
- delivery.py: polling loop that delivers due reminders
"""
