"""NewsItem - one headline from the news search feed."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NewsItem(BaseModel):
    """Headline parsed from an RSS item block. publishedAt is kept as the raw feed string."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    url: str = ""
    published_at: str = Field("", alias="publishedAt")
    source: str = ""
    description: str = ""
