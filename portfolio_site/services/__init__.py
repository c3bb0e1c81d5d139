"""
Portfolio Site Services Module.

Services:
    - ContactService: validates submissions and relays them as two emails
    - email_templates: HTML / plain-text bodies for those emails
"""

from .contact_service import ContactService, DeliveryReport

__all__ = ["ContactService", "DeliveryReport"]
