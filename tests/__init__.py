"""Unit tests for the chat storage service."""
