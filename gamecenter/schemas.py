"""
Pydantic schemas for tool input.

The PR tracker is invoked from CI with the merged pull request described in
environment variables; this module turns those into a validated event.
"""

import os
from datetime import datetime, timezone
from typing import Mapping, Optional

from pydantic import BaseModel, Field


def _utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC timestamp, e.g. 2024-01-15T10:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


# ==========================================
# Pull Request Events
# ==========================================

class PullRequestEvent(BaseModel):
    """A merged pull request to record against the games it touched."""
    number: int
    title: str = ""
    url: str = ""
    merged_at: str = Field(default_factory=_utc_now_iso)
    author: str = "unknown"
    body: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PullRequestEvent":
        """
        Build an event from the PR_* environment variables set by the workflow.

        Empty PR_MERGED_AT and PR_AUTHOR fall back to their defaults. Raises
        pydantic.ValidationError when PR_NUMBER is missing or not an integer.
        """
        env = os.environ if environ is None else environ
        data: dict[str, str] = {
            "title": env.get("PR_TITLE", ""),
            "url": env.get("PR_URL", ""),
            "body": env.get("PR_BODY", ""),
        }
        if "PR_NUMBER" in env:
            data["number"] = env["PR_NUMBER"].strip()
        if env.get("PR_MERGED_AT"):
            data["merged_at"] = env["PR_MERGED_AT"]
        if env.get("PR_AUTHOR"):
            data["author"] = env["PR_AUTHOR"]
        return cls(**data)
