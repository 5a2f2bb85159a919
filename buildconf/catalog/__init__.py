"""Concrete entity definitions."""

from buildconf.catalog.build_features import (
    ParallelTests,
    ProvideAwsCredentials,
    PullRequests,
    RubyEnvConfigurator,
)
from buildconf.catalog.build_steps import EchoStep, FxCopStep, SSHUpload
from buildconf.catalog.project_features import AwsConnection, AzureDevOpsOAuthConnection

__all__ = [
    "CATALOG",
    "AwsConnection",
    "AzureDevOpsOAuthConnection",
    "EchoStep",
    "FxCopStep",
    "ParallelTests",
    "ProvideAwsCredentials",
    "PullRequests",
    "RubyEnvConfigurator",
    "SSHUpload",
]

CATALOG = (
    EchoStep,
    FxCopStep,
    SSHUpload,
    ParallelTests,
    ProvideAwsCredentials,
    PullRequests,
    RubyEnvConfigurator,
    AwsConnection,
    AzureDevOpsOAuthConnection,
)
