"""
Service layer.

Each service encapsulates business logic for one concern and works
against an injected ``MemoryStore``, so API handlers never touch
storage directly.
"""
