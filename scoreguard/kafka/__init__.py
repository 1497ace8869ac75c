from .base import AuditProcessor

__all__ = ["AuditProcessor"]
