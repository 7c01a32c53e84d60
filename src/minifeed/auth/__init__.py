"""
minifeed.auth

Authentication/authorization package.

Responsibilities:
- Password hashing and verification (bcrypt).
- RSA key material, JWT issuing and verification.
- Principal model, authorization guard, FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `deps` imports FastAPI; everything else is framework-free and unit-testable.
