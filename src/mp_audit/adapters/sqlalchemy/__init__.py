"""SQLAlchemy adapter – auditing unit of work and primary-key resolver.

Requires the ``sqlalchemy`` extra::

    pip install "mp-audit[sqlalchemy]"
"""
from mp_audit.adapters.sqlalchemy.identity import column_values, sqlalchemy_primary_key
from mp_audit.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from mp_audit.adapters.sqlalchemy.uow import SqlAlchemyAuditUnitOfWork

__all__ = [
    "SqlAlchemyAuditUnitOfWork",
    "SqlAlchemySessionFactory",
    "column_values",
    "sqlalchemy_primary_key",
]
