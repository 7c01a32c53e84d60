"""
minifeed.db.repositories

Repository package; repositories are imported directly from submodules.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; auth and ownership rules live in services.
