"""VentyTime Application Package — event discovery and registration service.

Invariants:
    - Package root holds only the version string (no import side-effects)
"""

__version__ = "1.0.0"
