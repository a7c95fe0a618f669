from .lookup import ModelCatalog, get_catalog

__all__ = ["ModelCatalog", "get_catalog"]
