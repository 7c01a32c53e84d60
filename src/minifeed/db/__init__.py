"""
minifeed.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, repositories and startup seeding.
"""

# Package marker.
