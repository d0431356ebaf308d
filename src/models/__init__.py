from .base import Base, BaseModel, CreatedAt, UpdatedAt

__all__ = [
    "BaseModel",
    "Base",
    "CreatedAt",
    "UpdatedAt",
]
