"""Globalping API access.

See Also
--------
gpcli.types.messages : Request/response message types
"""

from .client import GlobalpingClient

__all__ = ["GlobalpingClient"]
