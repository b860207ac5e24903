"""Sets up the authenticated githubkit client."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy]


async def get_github_token_client(github_token: str, github_api_url: str) -> GitHubClient:
    """Returns a client authenticated with the workflow run's token.

    The API URL is configurable for GitHub Enterprise Server.
    """
    if not github_token:
        raise RuntimeError("Authenticating with GitHub requires GITHUB_TOKEN to be set.")
    # Pull request lookups must see the state left by the previous run
    return GitHub(auth=TokenAuthStrategy(github_token), base_url=github_api_url, http_cache=False)
