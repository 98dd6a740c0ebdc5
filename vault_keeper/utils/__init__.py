"""Utility modules for the vault.

Submodules are imported directly (``from vault_keeper.utils.field_cipher
import FieldCipher``); this package does not re-export them so that the
logger can be imported without pulling in the database layer.
"""
