"""
Async client for the price tracker REST API.
"""

from src.client.api_client import ApiClient
from src.client.interceptor import ClassifiedError, RetryInterceptor, classify_failure
from src.client.notifier import InMemoryNotifier, LogNotifier, Notifier

__all__ = [
    "ApiClient",
    "ClassifiedError",
    "InMemoryNotifier",
    "LogNotifier",
    "Notifier",
    "RetryInterceptor",
    "classify_failure",
]
