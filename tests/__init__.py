"""Tests for the langreader package."""
