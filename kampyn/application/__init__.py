"""
Application Layer

Contains the application's use cases and interfaces.
This layer orchestrates the flow of data to and from the entities,
and directs those entities to use their enterprise wide business rules.
"""
