"""Kiln configuration.

KilnConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class KilnConfig:
    """Configuration for a Kiln site.

    Attributes:
        root: Path to the site root directory (contains content/, layouts/, etc.).
              Always resolved to an absolute path on construction.
        host: Bind address for the dev server.
        port: Bind port for the dev server.
        output: Output directory for compiled HTML.
        content_dir: Directory containing markdown documents.
        layouts_dir: Directory containing layout templates.
        partials_dir: Directory containing partial fragments.
        public_dir: Directory served verbatim under ``/public/``.
        default_layout: Layout used when a document names none.
        shared_partial: Sitewide partial every document depends on.
        base_url: Base URL exposed to layouts as ``base_url``.
        clean: Remove the output directory before a build.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 3000
    output: Path = field(default_factory=lambda: Path("dist"))
    content_dir: str = "content"
    layouts_dir: str = "layouts"
    partials_dir: str = "content/_partials"
    public_dir: str = "public"
    default_layout: str = "default"
    shared_partial: str = "async"
    base_url: str = "/"
    clean: bool = False

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; graph keys must compare equal.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def content_path(self) -> Path:
        """Absolute path to content directory."""
        return self.root / self.content_dir

    @property
    def layouts_path(self) -> Path:
        """Absolute path to layouts directory."""
        return self.root / self.layouts_dir

    @property
    def partials_path(self) -> Path:
        """Absolute path to partials directory."""
        return self.root / self.partials_dir

    @property
    def public_path(self) -> Path:
        """Absolute path to public assets directory."""
        return self.root / self.public_dir

    @property
    def output_path(self) -> Path:
        """Absolute path to output directory."""
        if self.output.is_absolute():
            return self.output
        return self.root / self.output

    @property
    def watch_roots(self) -> tuple[Path, ...]:
        """Directories observed by the dev watcher."""
        return (self.content_path, self.layouts_path, self.partials_path)
