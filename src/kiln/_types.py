"""Shared type definitions for kiln."""

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from pathlib import Path

# Mode of operation
type KilnMode = Literal["dev", "build"]

# Absolute path to a content document (markdown source)
type DocumentPath = Path

# Absolute path to a layout or partial a document consumed
type ResourcePath = Path

# SSE client identifier
type ClientID = str

# Outcome of one rebuild batch
type RebuildStatus = Literal["skipped", "succeeded", "partial", "failed"]
