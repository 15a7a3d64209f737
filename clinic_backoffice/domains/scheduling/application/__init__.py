"""
Scheduling Application Layer

Ports, DTOs, services and use cases for appointment validation and
the reminder pipeline.
"""
