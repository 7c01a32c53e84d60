"""
minifeed.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Apply credential checks and ownership rules on top of the repositories.
"""

# Package marker.
