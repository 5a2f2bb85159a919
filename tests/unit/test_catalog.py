"""Unit tests for the bundled entity catalogue."""

import pytest

from buildconf.catalog import (
    CATALOG,
    AwsConnection,
    AzureDevOpsOAuthConnection,
    FxCopStep,
    ParallelTests,
    ProvideAwsCredentials,
    PullRequests,
    RubyEnvConfigurator,
    SSHUpload,
)
from buildconf.catalog.build_features import (
    BitbucketServerPasswordAuth,
    BitbucketServerProvider,
    GitHubProvider,
    GitHubRoleFilter,
    InterpreterAndGemset,
    RubyInterpreter,
    SpaceConnectionAuth,
    SpaceProvider,
)
from buildconf.catalog.build_steps import (
    AutoDetectedFxCop,
    FxCopProject,
    FxCopVersion,
    PasswordAuth,
    SshAgent,
    TransportProtocol,
    UploadedKey,
)
from buildconf.catalog.project_features import IamRoleCredentials, StaticCredentials


class TestCatalog:
    """Tests for catalogue-wide properties."""

    def test_types_unique(self) -> None:
        """Test each entity has a distinct type and fixed-param pair."""
        keys = {(cls.type, tuple(cls.fixed_params().items())) for cls in CATALOG}
        assert len(keys) == len(CATALOG)

    @pytest.mark.parametrize("entity_cls", CATALOG)
    def test_fresh_entities_construct(self, entity_cls: type) -> None:
        """Test every catalogue entity can be built empty."""
        entity = entity_cls()
        assert entity.type == entity_cls.type


class TestPullRequests:
    """Tests for the pull requests feature."""

    def test_provider_required(self) -> None:
        """Test the provider is mandatory."""
        assert [e.path for e in PullRequests().validate()] == ["provider"]

    def test_github_filters(self) -> None:
        """Test GitHub filter fields use their camelCase keys."""

        def configure(pr: PullRequests) -> None:
            github = pr.select(PullRequests.provider, GitHubProvider)
            github.filter_author_role = GitHubRoleFilter.MEMBER_OR_COLLABORATOR
            github.filter_target_branch = "+:refs/heads/main"

        pr = PullRequests(configure)
        assert pr.bag.items() == [
            ("providerType", "github"),
            ("filterAuthorRole", "MEMBER_OR_COLLABORATOR"),
            ("filterTargetBranch", "+:refs/heads/main"),
        ]

    def test_bitbucket_password_auth(self) -> None:
        """Test password auth requires username and password."""

        def configure(pr: PullRequests) -> None:
            server = pr.select(PullRequests.provider, BitbucketServerProvider)
            server.select(BitbucketServerProvider.auth_type, BitbucketServerPasswordAuth)

        pr = PullRequests(configure)
        assert [e.path for e in pr.validate()] == ["provider.authType.username", "provider.authType.password"]

    def test_legacy_request_branches_key(self) -> None:
        """Test the renamed flag keeps its stored key."""
        pr = PullRequests(lambda p: p.select(PullRequests.provider, BitbucketServerProvider))
        pr.provider.use_pull_request_branches = True
        assert pr.bag.get("useRequestBranches") == "true"

    def test_space_credentials(self) -> None:
        """Test Space uses its own selector key."""

        def configure(pr: PullRequests) -> None:
            space = pr.select(PullRequests.provider, SpaceProvider)
            space.select(SpaceProvider.auth_type, SpaceConnectionAuth)

        pr = PullRequests(configure)
        assert pr.bag.get("spaceCredentialsType") == "spaceCredentialsConnection"
        assert [e.path for e in pr.validate()] == ["provider.authType.connectionId"]


class TestSimpleFeatures:
    """Tests for features without variants."""

    def test_parallel_tests(self) -> None:
        """Test the batch count is required and stored as a number."""
        feature = ParallelTests()
        assert [e.path for e in feature.validate()] == ["numberOfBatches"]
        feature.number_of_batches = 4
        assert feature.validate() == []
        assert feature.bag.get("numberOfBatches") == "4"

    def test_provide_aws_credentials(self) -> None:
        """Test AWS credential keys."""
        feature = ProvideAwsCredentials()
        feature.aws_connection_id = "AwsMain"
        feature.session_duration = "60"
        assert feature.bag.to_dict() == {"awsConnectionId": "AwsMain", "awsSessionDuration": "60"}


class TestRubyEnvConfigurator:
    """Tests for the Ruby environment configurator."""

    def test_interpreter_uses_empty_discriminator(self) -> None:
        """Test the interpreter path variant is tagged with an empty value."""
        feature = RubyEnvConfigurator()
        feature.select(RubyEnvConfigurator.method, RubyInterpreter, lambda m: setattr(m, "path", "/usr/bin/ruby"))
        assert feature.bag.get("ui.ruby.configurator.use.rvm") == ""
        assert isinstance(feature.method, RubyInterpreter)

    def test_require_rvm_flag(self) -> None:
        """Test the RVM requirement flag writes the rvm_path reference."""
        feature = RubyEnvConfigurator()
        gemset = feature.select(RubyEnvConfigurator.method, InterpreterAndGemset)
        gemset.require_rvm = True
        gemset.create_gemset_if_not_exists = False
        assert feature.bag.get("ui.ruby.configurator.rvm.path") == "%env.rvm_path%"
        assert feature.bag.get("ui.ruby.configurator.rvm.gemset.create.if.non.exists") == ""


class TestSSHUpload:
    """Tests for the SSH upload step."""

    def test_required_properties(self) -> None:
        """Test protocol, paths and auth method are required."""
        assert [e.path for e in SSHUpload().validate()] == [
            "transportProtocol",
            "sourcePath",
            "targetUrl",
            "authMethod",
        ]

    def test_transport_mapping(self) -> None:
        """Test the protocol is stored under its server value."""
        step = SSHUpload()
        step.transport_protocol = TransportProtocol.SCP
        assert step.bag.get("jetbrains.buildServer.deployer.ssh.transport") == (
            "jetbrains.buildServer.deployer.ssh.transport.scp"
        )
        assert step.transport_protocol is TransportProtocol.SCP

    @pytest.mark.parametrize(
        "method,expected",
        [
            (UploadedKey, ["authMethod.username", "authMethod.key"]),
            (PasswordAuth, ["authMethod.username"]),
            (SshAgent, ["authMethod.username"]),
        ],
    )
    def test_auth_method_requirements(self, method: type, expected: list[str]) -> None:
        """Test each auth method reports its own missing properties."""

        def configure(step: SSHUpload) -> None:
            step.transport_protocol = TransportProtocol.SFTP
            step.source_path = "dist/*"
            step.target_url = "host:/srv"
            step.select(SSHUpload.auth_method, method)

        assert [e.path for e in SSHUpload(configure).validate()] == expected


class TestFxCop:
    """Tests for the FxCop step."""

    def test_version_mapping(self) -> None:
        """Test the any-version member maps to not_specified."""
        step = FxCopStep()
        auto = step.select(FxCopStep.fx_cop_installation, AutoDetectedFxCop)
        auto.version = FxCopVersion.ANY_DETECTED
        assert step.bag.get("fxcop.detection_mode") == "auto"
        assert step.bag.get("fxcop.version") == "not_specified"

    def test_flags_and_project(self) -> None:
        """Test flags use an empty false value."""
        step = FxCopStep()
        step.select(FxCopStep.inspection_source, FxCopProject, lambda p: setattr(p, "project_file", "a.FxCop"))
        step.search_in_gac = False
        step.fail_on_analysis_error = True
        assert step.bag.to_dict() == {
            "fxcop.what": "project",
            "fxcop.project": "a.FxCop",
            "fxcop.search_in_gac": "",
            "fxcop.fail_on_analysis_error": "true",
        }


class TestConnections:
    """Tests for project-level connections."""

    def test_static_credentials(self) -> None:
        """Test access keys are required and the secret is secure."""
        aws = AwsConnection()
        static = aws.select(AwsConnection.credentials_type, StaticCredentials)
        assert [e.path for e in aws.validate()] == ["credentialsType.accessKeyId", "credentialsType.secretAccessKey"]
        static.access_key_id = "AKIA"
        static.secret_access_key = "shh"
        assert aws.validate() == []
        assert aws.bag.get("secure:awsSecretAccessKey") == "shh"

    def test_iam_role(self) -> None:
        """Test the role ARN is required."""
        aws = AwsConnection(lambda c: c.select(AwsConnection.credentials_type, IamRoleCredentials))
        assert [e.path for e in aws.validate()] == ["credentialsType.roleArn"]

    def test_azure_devops_secret_key(self) -> None:
        """Test the client secret is stored under a secure key."""
        conn = AzureDevOpsOAuthConnection()
        conn.client_secret = "x"
        assert conn.bag.items() == [("providerType", "AzureDevOps"), ("secure:clientSecret", "x")]
