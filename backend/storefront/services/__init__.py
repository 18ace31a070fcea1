"""
Services Layer

Business logic that routes call into:
- Accept domain inputs (sessions, ids, field dicts, raw bytes)
- Return domain outputs (models, claims, decisions)
- Do NOT depend on HTTP request/response objects
"""
