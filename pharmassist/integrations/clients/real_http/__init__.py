"""
Real HTTP integration clients.

These clients communicate with real external systems via HTTP:
- the unified products catalogue API (paginated product listing)

They must return data shaped according to pharmassist/integrations/contracts/*.
"""

from .unified_products import UnifiedProductsClient

__all__ = ["UnifiedProductsClient"]
