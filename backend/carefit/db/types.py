"""
Column types that work on both PostgreSQL and SQLite.

Production runs on PostgreSQL (native UUID and JSONB); the test suite runs on
SQLite, where UUIDs are stored as 36-character strings and JSON as text.
"""

import uuid
from sqlalchemy import JSON, String, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB, UUID as PostgresUUID


class GUID(TypeDecorator):
    """UUID column: native on PostgreSQL, String(36) elsewhere."""

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgresUUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class JSONDocument(TypeDecorator):
    """
    Structured value column (paired trials, medical history).

    Stored as JSONB on PostgreSQL so the value stays queryable; plain JSON on
    other dialects.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())
