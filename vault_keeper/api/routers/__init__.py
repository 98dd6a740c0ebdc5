from . import cards, files, health, passwords, users

__all__ = ["cards", "files", "health", "passwords", "users"]
