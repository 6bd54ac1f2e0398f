from .model import Taxonomy

__all__ = ["Taxonomy"]
