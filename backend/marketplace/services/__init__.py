"""Services Layer — listing store, attachment manager, listing pipeline and identity.

Invariants:
    - Services own the AsyncSession and the image store; core/ never sees either
    - One class per concern, composed per request in api/deps.py

Design Decisions:
    - Constructor injection over module globals so tests can swap the image store
"""
