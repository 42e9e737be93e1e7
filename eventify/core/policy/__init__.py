from .engine import PolicyFilter

__all__ = ["PolicyFilter"]
