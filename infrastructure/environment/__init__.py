# infrastructure/environment/__init__.py
from infrastructure.environment.file_environment_source import FileEnvironmentSource
from infrastructure.environment.loader_registry import EnvironmentLoaderRegistry
from infrastructure.environment.process_env_provider import ProcessEnvProvider

__all__ = [
    "EnvironmentLoaderRegistry",
    "FileEnvironmentSource",
    "ProcessEnvProvider",
]
