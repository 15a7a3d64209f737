"""
Clinic back-office service.

Appointment scheduling validation and WhatsApp reminder dispatch.
"""

__version__ = "0.1.0"
