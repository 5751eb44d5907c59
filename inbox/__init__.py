"""Unified inbox for WhatsApp and Instagram customer messages."""
