"""Raw API payload factories."""

from __future__ import annotations

from typing import Any


def make_post(post_id: int = 1, **overrides: Any) -> dict[str, Any]:
    """A CryptoPanic /posts result entry."""
    post = {
        "id": post_id,
        "slug": f"bitcoin-story-{post_id}",
        "title": f"Bitcoin story {post_id}",
        "description": f"Description {post_id}",
        "published_at": "2024-01-15T12:00:00Z",
        "kind": "news",
    }
    post.update(overrides)
    return post
