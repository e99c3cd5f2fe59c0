"""
TTL-Cache: In-Process TTL Key-Value Cache

A generic time-to-live cache with a four-way lookup result, plus an
asyncio HTTP listener that can serve handler responses through it.
"""

__version__ = "1.0.0"
