"""Ingestion of SQCB API payloads."""

from .sqcb_transformer import SqcbTransformer, unwrap_payload

__all__ = ['SqcbTransformer', 'unwrap_payload']
