class ProfileError(Exception):
    """Base exception for profile discovery errors."""


class ProfileNotFoundError(ProfileError):
    """Raised when no Firefox profile with a places database can be found."""
