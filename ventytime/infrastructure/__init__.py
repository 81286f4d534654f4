"""Infrastructure Layer — database, security, storage, caching and push delivery.

Invariants:
    - Infrastructure never imports from services/ or api/
"""
