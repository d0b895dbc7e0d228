"""Connectors to external systems."""

from .sqcb_api_connector import SqcbApiConnector, SqcbApiError

__all__ = ['SqcbApiConnector', 'SqcbApiError']
