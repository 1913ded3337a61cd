"""Telegram media group collection and conversion.

Provides:
- MediaGroupStore: batched, order-preserving media group storage
- extract_messages: pulls candidate messages out of Bot API results
- to_input_media: turns a stored media group into sendMediaGroup payloads
"""
