from models.user import RegisterRequest

__all__ = [
    "RegisterRequest",
]
