"""
Scheduling Domain Layer

Entities and value objects for appointment validation and reminders.
"""
