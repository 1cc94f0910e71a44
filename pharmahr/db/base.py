"""Declarative base shared by every table."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models declare plain ``Column`` attributes with loose type hints.
    __allow_unmapped__ = True
