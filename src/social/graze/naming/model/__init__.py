"""
Database Models

This package defines the database models for the naming service using SQLAlchemy ORM.
These models hold the NamingSystem registry that identifier resolution reads from.

Key Models:
- base.py: Base SQLAlchemy model with common type definitions
- naming_system.py: Identifier systems and their unique ids
- health.py: Health monitoring gauge (not persisted)

The data models follow these relationships:
- NamingSystem: One identifier system, e.g. US Social Security Number
- UniqueId: One representation of a system (its OID, its URI, ...), ordered by position

The registry is written by the import utility and only read by the service.
"""
