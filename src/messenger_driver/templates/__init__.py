from messenger_driver.templates.base import Template
from messenger_driver.templates.objects import Address, Adjustment, Element, Summary
from messenger_driver.templates.receipt import ReceiptTemplate

__all__ = ["Address", "Adjustment", "Element", "ReceiptTemplate", "Summary", "Template"]
