"""Declarative base shared by all models."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def sql_in_list(values) -> str:
    """Quoted SQL list for CHECK constraints over fixed string values: ('A', 'B')."""
    return "(" + ", ".join(f"'{v}'" for v in values) + ")"
