from .responses import SchoolRead

__all__ = ["SchoolRead"]
