"""
Per-family command validators.

Each validator has the signature ``(payload, document) -> None`` and raises
the first failing rule as an ``XsdEditError``; it never mutates the document.
"""
