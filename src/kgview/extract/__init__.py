from .entities import EntityExtractor, extract

__all__ = ["EntityExtractor", "extract"]
