"""Pydantic models for GitHub contents API payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ContentEntry(GitHubBaseModel):
    name: str
    path: str
    type: Literal["file", "dir", "symlink", "submodule"]
    sha: str
    size: int | None = None

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"

    @property
    def is_file(self) -> bool:
        return self.type == "file"


class ContentCommit(GitHubBaseModel):
    sha: str
    html_url: str | None = None


class ContentWriteResponse(GitHubBaseModel):
    content: ContentEntry | None = None
    commit: ContentCommit
