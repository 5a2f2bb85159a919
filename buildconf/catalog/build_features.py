"""Build features: pull requests, parallel tests, AWS credentials, Ruby env."""

from enum import Enum

from buildconf.entity import BuildFeature
from buildconf.fields import BoolField, EnumField, IntField, StringField
from buildconf.variants import Variant, VariantSlot

__all__ = [
    "AzureDevOpsProvider",
    "BitbucketCloudProvider",
    "BitbucketServerProvider",
    "GitHubProvider",
    "GitHubRoleFilter",
    "GitLabProvider",
    "ParallelTests",
    "ProvideAwsCredentials",
    "PullRequestProvider",
    "PullRequests",
    "RubyEnvConfigurator",
    "RubyEnvMethod",
    "SpaceProvider",
]

# ============================================================================
# Pull requests
# ============================================================================


class GitHubRoleFilter(Enum):
    """Pull request contributor role filter options."""

    MEMBER = "member"
    MEMBER_OR_COLLABORATOR = "member_or_collaborator"
    EVERYBODY = "everybody"


class _TokenAuth:
    token = StringField("secure:accessToken", required=True)


class _PasswordAuth:
    username = StringField(required=True)
    password = StringField("secure:password", required=True)


class GitHubAuth(Variant):
    """Authentication for GitHub providers."""


class GitHubVcsRootAuth(GitHubAuth):
    """Use VCS root credentials."""

    discriminator = "vcsRoot"


class GitHubTokenAuth(_TokenAuth, GitHubAuth):
    discriminator = "token"


class GitLabAuth(Variant):
    """Authentication for GitLab providers."""


class GitLabVcsRootAuth(GitLabAuth):
    discriminator = "vcsRoot"


class GitLabTokenAuth(_TokenAuth, GitLabAuth):
    discriminator = "token"


class BitbucketServerAuth(Variant):
    """Authentication for Bitbucket Server / Data Center."""


class BitbucketServerVcsRootAuth(BitbucketServerAuth):
    discriminator = "vcsRoot"


class BitbucketServerPasswordAuth(_PasswordAuth, BitbucketServerAuth):
    discriminator = "password"


class BitbucketServerTokenAuth(_TokenAuth, BitbucketServerAuth):
    discriminator = "token"


class BitbucketCloudAuth(Variant):
    """Authentication for Bitbucket Cloud."""


class BitbucketCloudVcsRootAuth(BitbucketCloudAuth):
    discriminator = "vcsRoot"


class BitbucketCloudPasswordAuth(_PasswordAuth, BitbucketCloudAuth):
    discriminator = "password"


class AzureDevOpsAuth(Variant):
    """Authentication for Azure DevOps."""


class AzureDevOpsTokenAuth(_TokenAuth, AzureDevOpsAuth):
    discriminator = "token"


class SpaceAuth(Variant):
    """Authentication for JetBrains Space."""


class SpaceConnectionAuth(SpaceAuth):
    """Credentials from a JetBrains Space connection project feature."""

    discriminator = "spaceCredentialsConnection"

    connection_id = StringField("spaceConnectionId", required=True)


class PullRequestProvider(Variant):
    """Code hosting service that pull requests are read from."""


class GitHubProvider(PullRequestProvider):
    """GitHub or GitHub Enterprise."""

    discriminator = "github"

    server_url = StringField()
    auth_type = VariantSlot("authenticationType", GitHubAuth)
    filter_source_branch = StringField()
    filter_target_branch = StringField()
    filter_author_role = EnumField(GitHubRoleFilter)


class GitLabProvider(PullRequestProvider):
    """GitLab.com or GitLab CE/EE."""

    discriminator = "gitlab"

    server_url = StringField()
    auth_type = VariantSlot("authenticationType", GitLabAuth)
    filter_source_branch = StringField()
    filter_target_branch = StringField()


class BitbucketServerProvider(PullRequestProvider):
    """Bitbucket Server / Data Center."""

    discriminator = "bitbucketServer"

    server_url = StringField()
    auth_type = VariantSlot("authenticationType", BitbucketServerAuth)
    filter_source_branch = StringField()
    filter_target_branch = StringField()
    # Legacy pull-requests/N branches; backward compatibility only
    use_pull_request_branches = BoolField("useRequestBranches")


class BitbucketCloudProvider(PullRequestProvider):
    """Bitbucket Cloud."""

    discriminator = "bitbucketCloud"

    auth_type = VariantSlot("authenticationType", BitbucketCloudAuth)
    filter_target_branch = StringField()


class AzureDevOpsProvider(PullRequestProvider):
    """Azure DevOps Services/Server."""

    discriminator = "azureDevOps"

    project_url = StringField()
    auth_type = VariantSlot("authenticationType", AzureDevOpsAuth)
    filter_source_branch = StringField()
    filter_target_branch = StringField()


class SpaceProvider(PullRequestProvider):
    """JetBrains Space."""

    discriminator = "jetbrainsSpace"

    filter_target_branch = StringField()
    auth_type = VariantSlot("spaceCredentialsType", SpaceAuth)


class PullRequests(BuildFeature):
    """Watches a code hosting service for pull requests.

    An empty ``vcs_root_ext_id`` reads pull requests from the first VCS root
    attached to the build configuration.
    """

    type = "pullRequests"

    vcs_root_ext_id = StringField("vcsRootId")
    provider = VariantSlot("providerType", PullRequestProvider, required=True)


# ============================================================================
# Parallel tests
# ============================================================================


class ParallelTests(BuildFeature):
    """Splits the build's tests into batches run on separate agents."""

    type = "parallelTests"

    number_of_batches = IntField(required=True)


# ============================================================================
# AWS credentials
# ============================================================================


class ProvideAwsCredentials(BuildFeature):
    """Exposes temporary AWS credentials from an AWS connection to the build.

    ``aws_connection_id`` names the connection by its project feature id.
    """

    type = "PROVIDE_AWS_CREDS"

    aws_connection_id = StringField()
    session_duration = StringField("awsSessionDuration")


# ============================================================================
# Ruby environment configurator
# ============================================================================

_RVM_PATH = "ui.ruby.configurator.rvm.path"
_RBENV_ROOT = "ui.ruby.configurator.rbenv.root.path"


class _RequireRvm:
    require_rvm = BoolField(_RVM_PATH, true_value="%env.rvm_path%", false_value="")


class _RequireRbenv:
    require_rbenv = BoolField(_RBENV_ROOT, true_value="%env.RBENV_ROOT%", false_value="")


class RubyEnvMethod(Variant):
    """How the Ruby interpreter is located."""


class RubyInterpreter(RubyEnvMethod):
    """Explicit path to a Ruby interpreter."""

    discriminator = ""

    path = StringField("ui.ruby.configurator.ruby.interpreter.path")


class InterpreterAndGemset(_RequireRvm, RubyEnvMethod):
    """RVM interpreter plus gemset."""

    discriminator = "manual"

    interpreter = StringField("ui.ruby.configurator.rvm.sdk.name")
    gemset = StringField("ui.ruby.configurator.rvm.gemset.name")
    create_gemset_if_not_exists = BoolField(
        "ui.ruby.configurator.rvm.gemset.create.if.non.exists", true_value="true", false_value=""
    )


class Rvmrc(_RequireRvm, RubyEnvMethod):
    discriminator = "rvmrc"

    path = StringField("ui.ruby.configurator.rvm.rvmrc.path")


class RvmConfigDirectory(_RequireRvm, RubyEnvMethod):
    discriminator = "rvm_ruby_version"

    path = StringField("ui.ruby.configurator.rvm.ruby_version.path")


class Rbenv(_RequireRbenv, RubyEnvMethod):
    discriminator = "rbenv"

    interpreter_version = StringField("ui.ruby.configurator.rbenv.version.name")


class RbenvConfigDirectory(_RequireRbenv, RubyEnvMethod):
    discriminator = "rbenv_file"

    path = StringField("ui.ruby.configurator.rbenv.file.path")


class RubyEnvConfigurator(BuildFeature):
    """Passes Ruby interpreter settings to Ruby build steps."""

    type = "ruby.env.configurator"

    method = VariantSlot("ui.ruby.configurator.use.rvm", RubyEnvMethod)
    fail_if_interpreter_not_found = BoolField(
        "ui.ruby.configurator.fail.build.if.interpreter.not.found", true_value="true", false_value=""
    )
