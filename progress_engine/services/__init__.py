"""Service layer"""
from progress_engine.services.progress_service import ProgressService

__all__ = ["ProgressService"]
