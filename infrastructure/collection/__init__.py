# infrastructure/collection/__init__.py
from infrastructure.collection.bru_parser import BruParser
from infrastructure.collection.collection_config_loader import CollectionConfigLoader
from infrastructure.collection.request_loader import RequestLoader

__all__ = [
    "BruParser",
    "CollectionConfigLoader",
    "RequestLoader",
]
