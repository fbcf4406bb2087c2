from .base_validator import AbstractValidator

__all__ = ["AbstractValidator"]
