"""Data models: SQLAlchemy tables live in models.db."""
