"""
Identifier Resolution

This package resolves an identifier value in one representation into the
equivalent value of a requested representation, using the NamingSystem registry.

Key Components:
- preferred_id.py: The resolver, its request and its classified outcomes
- registry.py: Registry records and the lookups the resolver queries
- __main__.py: CLI interface for resolution

The resolution flow follows these steps:
1. Validate that both the identifier value and the requested type are present
2. Map the requested type onto a representation kind, ignoring case
3. Query the registry once for records having a unique id equal to the value
4. Take the first matching record
5. Return its single unique id of the requested kind, or a classified failure

The resolver never builds HTTP responses. The application layer maps outcomes
to status codes and FHIR payloads.
"""
