"""Processor adapters."""

from message_batcher.infrastructure.adapters.custom_processor import CustomProcessor

__all__ = ["CustomProcessor"]
