"""
Scheduling Domain

Appointment validation (overlap and business hours) and the WhatsApp
reminder pipeline: window scan, dispatch, delivery tracking and retries.
"""
