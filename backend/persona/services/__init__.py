"""Services Layer — orchestration of store IO around the pure core.

Invariants:
    - Services depend on core protocols, never on ORM models or sessions
    - Retry policy for interaction recording lives in exactly one place
      (interaction_recorder.py)

Design Decisions:
    - Impure shell around pure decisions: services call core functions with
      snapshots and hand the results back to the store
"""
