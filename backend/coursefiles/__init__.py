"""Course Files — list, filter and relicense files attached to a course."""

__version__ = "0.3.0"
