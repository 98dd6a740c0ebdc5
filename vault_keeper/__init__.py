"""
vault_keeper: multi-tenant secret vault backend.

Stores passwords, payment cards and files per customer behind a bearer
session token, encrypting sensitive attributes at rest.
"""

__version__ = "0.1.0"
