"""Markdown replies posted after claims are created.

Claims come straight from the claims API and are treated as loosely shaped
mappings: a missing handle, name or image degrades the text, never the call.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

GITPOAP_URL = "https://www.gitpoap.io"

Claim = cabc.Mapping[str, typ.Any]


def _mapping(value: object) -> cabc.Mapping[str, typ.Any]:
    if isinstance(value, cabc.Mapping):
        return typ.cast("cabc.Mapping[str, typ.Any]", value)
    return {}


def _github_handle(claim: Claim) -> str | None:
    handle = _mapping(claim.get("user")).get("githubHandle")
    return handle if isinstance(handle, str) and handle else None


def _badge(claim: Claim) -> str:
    gitpoap = _mapping(claim.get("gitPOAP"))
    name = gitpoap.get("name") or "GitPOAP"
    gitpoap_id = gitpoap.get("id")
    image_url = gitpoap.get("imageUrl")
    link = f"{GITPOAP_URL}/gp/{gitpoap_id}" if gitpoap_id is not None else GITPOAP_URL

    if image_url:
        badge = f"[![GitPOAP Badge: {name}]({image_url})]({link})"
    else:
        badge = f"[{name}]({link})"
    description = gitpoap.get("description")
    if description:
        return f"**{name}**: {description}\n\n{badge}"
    return f"**{name}**\n\n{badge}"


def _plural(count: int) -> str:
    return "GitPOAP" if count == 1 else f"{count} GitPOAPs"


def _footer() -> str:
    return (
        f"Head to [gitpoap.io]({GITPOAP_URL}) & connect your GitHub account to mint!"
    )


def generate_comment(claims: cabc.Sequence[Claim]) -> str:
    """Render the reply for claims earned by a merged pull request."""
    handle = next((h for h in map(_github_handle, claims) if h), None)
    greeting = f"Congrats, @{handle}! " if handle else "Congrats! "
    earned = "a GitPOAP" if len(claims) == 1 else _plural(len(claims))
    lines = [
        f"{greeting}You've earned {earned} for your contribution!",
        *(_badge(claim) for claim in claims),
        _footer(),
    ]
    return "\n\n".join(lines)


def generate_issue_comment(claims: cabc.Sequence[Claim]) -> str:
    """Render the reply for claims created by tagging the bot."""
    handles: list[str] = []
    for claim in claims:
        handle = _github_handle(claim)
        if handle and handle not in handles:
            handles.append(handle)

    recipients = ", ".join(f"@{h}" for h in handles)
    if recipients:
        intro = (
            f"Woohoo, {recipients}! Your contribution to this project has "
            f"earned you {'a GitPOAP' if len(claims) == 1 else _plural(len(claims))}!"
        )
    else:
        intro = (
            f"Woohoo! {_plural(len(claims))} "
            f"{'was' if len(claims) == 1 else 'were'} awarded for this contribution!"
        )
    lines = [intro, *(_badge(claim) for claim in claims), _footer()]
    return "\n\n".join(lines)


__all__ = ["GITPOAP_URL", "generate_comment", "generate_issue_comment"]
