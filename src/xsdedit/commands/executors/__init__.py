"""
Per-family command executors.

Each executor has the signature ``(payload, document) -> None``, mutates the
document in place and raises an ``XsdEditError`` before any mutation when one
of its own preconditions fails.
"""
