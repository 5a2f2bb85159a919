"""Pytest configuration and fixtures for buildconf tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from buildconf.catalog import PullRequests
from buildconf.catalog.build_features import GitHubProvider, GitHubTokenAuth
from buildconf.logging import clear_log_context

PULL_REQUESTS_YAML = """\
entities:
  - kind: buildFeature
    type: pullRequests
    id: PR_1
    params:
      providerType: github
      authenticationType: token
      "secure:accessToken": s3cret
  - kind: buildFeature
    type: pullRequests
    id: PR_2
    params:
      providerType: github
      authenticationType: token
  - kind: buildFeature
    type: parallelTests
    params:
      numberOfBatches: 3
"""


@pytest.fixture(autouse=True)
def reset_buildconf_logging() -> Generator[None, None, None]:
    """Undo handler and propagation changes made by setup_logging.

    Yields:
        None
    """
    yield
    root_logger = logging.getLogger("buildconf")
    root_logger.handlers = []
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    clear_log_context()


@pytest.fixture
def github_pull_requests() -> PullRequests:
    """Create a pull requests feature with GitHub token auth and no token.

    Returns:
        PullRequests entity missing its access token
    """

    def configure(pr: PullRequests) -> None:
        provider = pr.select(PullRequests.provider, GitHubProvider)
        provider.select(GitHubProvider.auth_type, GitHubTokenAuth)

    return PullRequests(configure, id="PR_1")


@pytest.fixture
def entities_file(tmp_path: Path) -> Path:
    """Write an entity document with one valid and two other entities.

    Returns:
        Path to the YAML document
    """
    path = tmp_path / "entities.yaml"
    path.write_text(PULL_REQUESTS_YAML)
    return path
