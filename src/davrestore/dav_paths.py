"""WebDAV URL construction and path normalization."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, urlsplit

from .constants import FILES_ROOT_TEMPLATE, TRASH_ROOT_TEMPLATE


def split_segments(relative_path: str) -> list[str]:
    return [segment for segment in relative_path.strip("/").split("/") if segment]


def normalize_relative_path(raw_path: str) -> str:
    """Strip surrounding separators and collapse empty segments."""
    return "/".join(split_segments(raw_path))


def encode_relative_path(relative_path: str) -> str:
    return "/".join(quote(segment, safe="") for segment in split_segments(relative_path))


def ancestor_paths(relative_path: str) -> list[str]:
    """Every proper prefix of the path, root-to-leaf, excluding the leaf itself."""
    segments = split_segments(relative_path)
    return ["/".join(segments[:index]) for index in range(1, len(segments))]


def server_relative_href(href: str) -> str:
    """Reduce an absolute href URL to its path relative to the server root."""
    value = href.strip()
    parts = urlsplit(value)
    if parts.scheme and parts.netloc:
        path = parts.path or "/"
        return f"{path}?{parts.query}" if parts.query else path
    return value


@dataclass(frozen=True)
class DavEndpoints:
    base_url: str
    username: str

    @property
    def origin(self) -> str:
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def _root(self) -> str:
        return self.base_url.rstrip("/")

    @property
    def _quoted_user(self) -> str:
        return quote(self.username, safe="")

    def trash_root_url(self) -> str:
        return self._root + TRASH_ROOT_TEMPLATE.format(user=self._quoted_user)

    def files_url(self, relative_path: str) -> str:
        root = self._root + FILES_ROOT_TEMPLATE.format(user=self._quoted_user)
        encoded = encode_relative_path(relative_path)
        return f"{root}/{encoded}" if encoded else root

    def source_url(self, source_ref: str) -> str:
        """Resolve a server-root-relative trash locator to an absolute URL."""
        path = server_relative_href(source_ref)
        if not path.startswith("/"):
            path = f"/{path}"
        return self.origin + path
