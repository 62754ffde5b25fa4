"""Zone grid and player dashboard."""
from .dashboard import Dashboard

__all__ = ["Dashboard"]
