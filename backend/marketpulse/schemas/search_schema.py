"""Pydantic schema for web search results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A single web search hit. Request-scoped, never persisted."""

    url: str = Field(default="", description="Result URL")
    title: str = Field(default="", description="Page title")
    content: str = Field(default="", description="Snippet / extracted content")
