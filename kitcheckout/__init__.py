"""
KitCheckout - sports equipment checkout tracker.

Students borrow and return equipment against a lending ledger; admins
manage inventory, categories and branding.
"""

__version__ = "1.0.0"
