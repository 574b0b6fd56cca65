"""
Declarative base shared by the credential and key-value tables.
"""
from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# Stable constraint names so SQLite and Postgres schemas match
metadata = MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
})

Base = declarative_base(metadata=metadata)
