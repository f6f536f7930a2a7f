from .publisher_service import PublisherService
from .generation_service import GenerationService, build_generation_service

__all__ = ['PublisherService', 'GenerationService', 'build_generation_service']
