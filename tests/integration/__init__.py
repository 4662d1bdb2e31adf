# tests/integration/__init__.py
"""
Integration tests for the DZK bridge.

These tests run the platform, accessories, controllers and shared unit
state together against an in-memory BACnet adapter.
"""
