"""
Pydantic schema definitions for API payloads.

Each domain (users, groups, certificates, policies, schedules, audit)
defines its own Pydantic models for request and response bodies.
Schemas are separated from the stored records so the API
representation (camelCase, no password) is decoupled from storage.
"""
