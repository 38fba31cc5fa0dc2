"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

INDEX_RELATIVE_PATH = "assets/search-index.json"


def _get_default_site_dir() -> Path:
    """Get the default built-site directory."""
    # Prefer an existing site/ build, otherwise the generator's default output
    site_dir = Path("site")
    if site_dir.exists():
        return site_dir
    return Path("dist")


@dataclass(slots=True)
class SearchConfig:
    site_dir: Path | None = None
    base_url: str | None = None
    fuzzy: bool = True
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.site_dir is None:
            self.site_dir = _get_default_site_dir()

    def resolve_site_dir(self, base_dir: Path | None = None) -> Path:
        if self.site_dir is None:
            self.site_dir = _get_default_site_dir()
        if Path(self.site_dir).is_absolute() or base_dir is None:
            return Path(self.site_dir)
        return base_dir / self.site_dir

    def resolve_index_source(self, base_dir: Path | None = None) -> str | Path:
        """Return the URL or file path of the search index."""
        if self.base_url:
            return self.base_url.rstrip("/") + "/" + INDEX_RELATIVE_PATH
        return self.resolve_site_dir(base_dir) / INDEX_RELATIVE_PATH
