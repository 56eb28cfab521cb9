"""Declarative base shared by the progress cache tables."""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

from arenadraw.db.metadata import metadata_obj

PK_TYPE = BigInteger().with_variant(Integer, "sqlite")
"""Surrogate key type. SQLite only autoincrements plain ``INTEGER`` keys."""


class Base(DeclarativeBase):
    metadata = metadata_obj
