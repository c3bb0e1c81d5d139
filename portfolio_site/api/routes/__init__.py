# Export all routers
from . import analytics, contact, site

__all__ = ["analytics", "contact", "site"]
