"""bestdex - best-execution multi-venue order router."""

__version__ = "0.1.0"

from bestdex.lens.facade import BestDexLens  # noqa: E402
from bestdex.routing.allocator import RouteAllocator  # noqa: E402

__all__ = ["BestDexLens", "RouteAllocator", "__version__"]
