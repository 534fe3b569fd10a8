"""
Application Layer
=================

Application services and use cases.
This layer orchestrates domain entities and repositories.

Contains:
- Use Cases: Business operations (start sprint, submit change, etc.)
- Services: Application services that coordinate multiple use cases
- DTOs: Request models validated at the API boundary
"""
