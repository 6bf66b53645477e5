"""
Service layer abstraction.

Services hold the business rules and talk to storage only through
the repository interface, so switching between the in-memory and
SQLite backends does not touch the API handlers.
"""
