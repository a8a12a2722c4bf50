"""
Service layer abstraction.

Each service encapsulates the logic for one domain and works against
the ``MemStorage`` instance it is handed, so API handlers never touch
the store directly.
"""
