"""
Naming - NamingSystem identifier resolution service

This module implements a service that translates identifiers between their equivalent
representations, for example from the URI of an identifier system to its OID. It backs
the FHIR NamingSystem $preferred-id operation with a registry of NamingSystem resources.

Key Components:
- app: Web application layer with request handlers and server configuration
- model: Database models for the NamingSystem registry
- resolve: The resolver and the registry lookups it queries

Architecture Overview:
1. Resolution:
   - A request carries an identifier value and the requested representation type
   - The registry is queried once for systems having a unique id equal to the value
   - The single unique id of the requested type is returned, or a classified failure

2. Operation:
   - GET and POST $preferred-id requests are mapped onto the same resolution request
   - Outcomes are rendered as FHIR Parameters or OperationOutcome resources
   - The CapabilityStatement advertises the operation when it is enabled

3. Registry Management:
   - NamingSystem resources are imported from JSON files into PostgreSQL
   - The service only ever reads the registry
"""
