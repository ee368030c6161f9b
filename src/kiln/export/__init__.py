"""Export layer — the parts of a build that are not page compilation."""

from kiln.export.assets import clean_output, sync_content_assets, sync_public

__all__ = ["clean_output", "sync_content_assets", "sync_public"]
