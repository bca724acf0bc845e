"""
Domain layer for newsletter subscription business logic.

This layer contains:
- Validation rules (pure predicates)
- Data models (validated value objects and records)
- Business logic (persist-then-notify subscription workflow)
- Result types (explicit success/failure handling)
"""
