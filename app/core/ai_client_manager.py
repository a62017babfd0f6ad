"""
AI Client Manager

This module manages the AI client instances used by the service. Each service type
gets its own dedicated client instance so feedback generation never contends with
other callers for the same connection pool.
"""

import os
from openai import AsyncOpenAI
import logging
import threading
from typing import Dict, Optional
from dotenv import load_dotenv

# Ensure .env is loaded
load_dotenv()

logger = logging.getLogger(__name__)

SERVICE_TYPES = ("feedback",)

class AIClientManager:
    """
    Manages dedicated AI client instances for different services.

    Clients are created lazily on first access, so importing this module never
    requires the API key to be present.
    """

    _lock = threading.Lock()

    def __init__(self):
        self._clients: Dict[str, AsyncOpenAI] = {}
        self._initialized = False

    def _initialize_clients(self):
        """Lazy initialization of client instances."""
        if self._initialized:
            return

        with self._lock:
            # Double-check locking for initialization
            if self._initialized:
                return

            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise RuntimeError(
                    "OPENAI_API_KEY environment variable is not set. "
                    "Please set it in your .env file or environment variables."
                )

            base_url = os.getenv("OPENAI_BASE_URL") or None

            try:
                self._clients = {
                    service_type: AsyncOpenAI(base_url=base_url, api_key=api_key)
                    for service_type in SERVICE_TYPES
                }

                self._initialized = True
                logger.info(f"Initialized {len(self._clients)} dedicated AI client instances")

            except Exception as e:
                logger.error(f"Failed to initialize AI clients: {e}")
                raise RuntimeError(f"Failed to initialize AI clients: {e}") from e

    def get_client(self, service_type: str) -> AsyncOpenAI:
        """
        Get a dedicated client for the specified service type.

        Args:
            service_type (str): Type of service ("feedback")

        Returns:
            AsyncOpenAI: Dedicated client instance for the service

        Raises:
            ValueError: If service_type is not supported
            RuntimeError: If clients failed to initialize
        """
        self._initialize_clients()

        if service_type not in self._clients:
            available_types = list(self._clients.keys())
            raise ValueError(f"Unsupported service type: {service_type}. Available: {available_types}")

        return self._clients[service_type]

    def get_feedback_client(self) -> AsyncOpenAI:
        """Get dedicated client for feedback generation."""
        return self.get_client("feedback")

# Lazy initialization - no eager instantiation
_ai_manager: Optional[AIClientManager] = None
_manager_lock = threading.Lock()

def get_ai_client_manager() -> AIClientManager:
    """
    Get the singleton AIClientManager instance with lazy initialization.

    Returns:
        AIClientManager: The singleton instance
    """
    global _ai_manager

    if _ai_manager is None:
        with _manager_lock:
            # Double-check locking pattern
            if _ai_manager is None:
                _ai_manager = AIClientManager()

    return _ai_manager

def get_feedback_client() -> AsyncOpenAI:
    """Get dedicated client for feedback generation."""
    return get_ai_client_manager().get_feedback_client()
