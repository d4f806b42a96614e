"""
Quote Client Test Suite
=======================

This package contains tests for the Quote Client including:
- Unit tests for individual components
- Integration tests for the submit/invalidate/notify flow
"""
