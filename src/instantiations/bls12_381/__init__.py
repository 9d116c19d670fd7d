from .inst import KZG

__all__ = ["KZG"]
