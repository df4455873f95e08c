"""Realtime infrastructure (Socket.IO presence and event delivery).

This package holds cross-domain realtime primitives so notifications,
conversations and billboard moderation share one socket server and one
connection registry.
"""
