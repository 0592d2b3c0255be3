from accounts.services.user.user_repository import UserRepository, normalize_email

__all__ = ["UserRepository", "normalize_email"]
