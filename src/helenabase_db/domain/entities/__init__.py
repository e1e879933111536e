"""Domain entities for the relational store.

Entities are objects with identity that have a lifecycle. Unlike value objects,
two entities with the same attributes may not be equal if they have different
identities.

Exports:
    Column:
        - Column: Typed field declaration

    Table:
        - Table: Named collection of rows with columns, indexes, policies
        - Index: Declared (unenforced) index
        - Policy: Declared (unevaluated) row-level policy

    Database:
        - Database: Schema -> table mapping, the persisted snapshot unit
"""

from helenabase_db.domain.entities.column import Column
from helenabase_db.domain.entities.database import Database
from helenabase_db.domain.entities.table import Index, Policy, Table

__all__ = [
    "Column",
    "Table",
    "Index",
    "Policy",
    "Database",
]
