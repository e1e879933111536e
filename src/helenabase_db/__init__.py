"""
HelenaBase DB - relational store engine for the HelenaBase console

An in-process relational store with schemas, typed columns, default and
auto-increment resolution, a filter/sort/page query pipeline and a minimal
SQL statement recognizer, persisted as whole snapshots to a key-value store.
"""

__version__ = "0.1.0"
__author__ = "HelenaBase"
