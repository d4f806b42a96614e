"""
API module for the quote client.
Provides the aiohttp-based client and pydantic models for the quotes service.
"""

__all__ = ['client', 'models']
