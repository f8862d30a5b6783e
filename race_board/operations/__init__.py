"""
Operations Layer

Business logic that composes database methods into roster workflows.

Architecture:
- Database layer: Pure data access and CRUD operations
- Operations layer: Input normalization, validation and roster workflows
- Command layer: Discord integration and user interface

- RosterOperations: team edits, templates and JSON import/export
"""
