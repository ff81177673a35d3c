"""Group services."""

from .audience_resolver import GroupAudienceResolver

__all__ = ["GroupAudienceResolver"]
