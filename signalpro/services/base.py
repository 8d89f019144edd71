"""
Base Service Interface

All pipeline stages inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all pipeline stages.

    Each stage:
    - Has a defined input type
    - Has a defined output type
    - Runs to completion synchronously (no internal scheduling)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the stage's main function.

        Args:
            input_data: Input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema
        """
        pass

    def health_check(self) -> bool:
        """Pure computation stages are always healthy."""
        return True


class ServiceError(Exception):
    """Base exception for service misuse (bad construction arguments)."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Invalid configuration passed to a service."""
    pass
