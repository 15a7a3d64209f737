"""
Core building blocks shared by every domain: DDD base classes,
logging setup and the FastAPI application lifecycle.
"""
