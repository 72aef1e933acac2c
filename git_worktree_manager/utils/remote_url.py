"""Repository identifier derivation from git remote URLs."""

import re

HTTPS_PREFIX = "https://"

# user@host:path, e.g. git@github.com:owner/repo
SSH_SHORTHAND_PATTERN = re.compile(r"^[^@/\s]+@[^:/\s]+:(?P<path>.+)$")


def derive_repo_identifier(remote_url: str) -> str:
    """
    Derive an ``organization/repository`` identifier from a remote URL.

    Handles HTTPS and SSH shorthand remotes:

        https://github.com/owner/repo.git -> owner/repo
        git@github.com:owner/repo.git     -> owner/repo

    No case, trailing slash or percent-encoding normalization is done.

    Args:
        remote_url: Remote URL as reported by ``git config --get remote.origin.url``

    Returns:
        The identifier, or an empty string if the URL is not recognized
    """
    url = remote_url.strip()
    if url.endswith(".git"):
        url = url[: -len(".git")]

    if url.startswith(HTTPS_PREFIX):
        segments = url[len(HTTPS_PREFIX):].split("/")
        # host plus at least two path segments
        if len(segments) < 3:
            return ""
        return "/".join(segments[-2:])

    match = SSH_SHORTHAND_PATTERN.match(url)
    if match:
        return "/".join(match.group("path").split("/"))

    return ""
