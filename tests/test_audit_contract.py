"""
AuditLog contract tests — in-memory and SQLite with :memory:.
"""

from src.adapters.memory_audit import InMemoryAuditLog
from src.adapters.sqlite_audit import SqliteAuditLog
from tests.contracts.audit_log_contract import AuditLogContract


class TestInMemoryAuditLog(AuditLogContract):

    def create_audit(self):
        return InMemoryAuditLog()


class TestSqliteAuditLog(AuditLogContract):

    def create_audit(self):
        return SqliteAuditLog(":memory:")
