"""Git access used by the branch browser."""

from .gateway import BranchListing, GitGateway

__all__ = ["BranchListing", "GitGateway"]
