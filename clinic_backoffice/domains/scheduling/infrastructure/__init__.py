"""
Scheduling Infrastructure Layer

SQLAlchemy repositories and the APScheduler reminder runner.
"""
