"""Services Layer — one service class per aggregate, constructed per request.

Invariants:
    - Services own transactions: each public write commits once or raises
    - Services raise VentyTimeError subclasses, never HTTPException
"""
