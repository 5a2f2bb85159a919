"""Build steps: SSH upload, FxCop inspections and the sample echo runner."""

from enum import Enum

from buildconf.entity import BuildStep
from buildconf.fields import BoolField, EnumField, IntField, StringField
from buildconf.variants import Variant, VariantSlot

__all__ = [
    "EchoStep",
    "FxCopInspectionSource",
    "FxCopInstallation",
    "FxCopStep",
    "FxCopVersion",
    "SSHAuthMethod",
    "SSHUpload",
    "TransportProtocol",
]

# ============================================================================
# SSH upload
# ============================================================================

_DEPLOYER = "jetbrains.buildServer.deployer"
_SSHEXEC = "jetbrains.buildServer.sshexec"


class TransportProtocol(Enum):
    SFTP = "sftp"
    SCP = "scp"


TRANSPORT_PROTOCOL_MAPPING = {
    TransportProtocol.SFTP: f"{_DEPLOYER}.ssh.transport.sftp",
    TransportProtocol.SCP: f"{_DEPLOYER}.ssh.transport.scp",
}


class _Username:
    username = StringField(f"{_DEPLOYER}.username", required=True)


class _Passphrase:
    passphrase = StringField(f"secure:{_DEPLOYER}.password")


class SSHAuthMethod(Variant):
    """How the SSH session authenticates."""


class UploadedKey(_Username, _Passphrase, SSHAuthMethod):
    """Key uploaded to the project's SSH keys."""

    discriminator = "UPLOADED_KEY"

    key = StringField("teamcitySshKey", required=True)


class DefaultPrivateKey(SSHAuthMethod):
    """Default private key of the agent (~/.ssh/id_rsa)."""

    discriminator = "DEFAULT_KEY"

    username = StringField(f"{_DEPLOYER}.username")
    passphrase = StringField(f"secure:{_DEPLOYER}.password")


class CustomPrivateKey(_Username, _Passphrase, SSHAuthMethod):
    """Private key file on the agent."""

    discriminator = "CUSTOM_KEY"

    key_file = StringField(f"{_SSHEXEC}.keyFile")


class PasswordAuth(_Username, SSHAuthMethod):
    discriminator = "PWD"

    password = StringField(f"secure:{_DEPLOYER}.password")


class SshAgent(_Username, SSHAuthMethod):
    """Keys held by the agent's ssh-agent."""

    discriminator = "SSH_AGENT"


class SSHUpload(BuildStep):
    """Uploads files to a remote host over SFTP or SCP."""

    type = "ssh-deploy-runner"

    transport_protocol = EnumField(
        TransportProtocol,
        f"{_DEPLOYER}.ssh.transport",
        mapping=TRANSPORT_PROTOCOL_MAPPING,
        required=True,
    )
    source_path = StringField(f"{_DEPLOYER}.sourcePath", required=True)
    target_url = StringField(f"{_DEPLOYER}.targetUrl", required=True)
    port = IntField(f"{_SSHEXEC}.port")
    timeout = IntField(f"{_SSHEXEC}.timeout.seconds")
    auth_method = VariantSlot(f"{_SSHEXEC}.authMethod", SSHAuthMethod, required=True)


# ============================================================================
# FxCop
# ============================================================================


class FxCopVersion(Enum):
    ANY_DETECTED = "any"
    V1_35 = "1.35"
    V9_0 = "9.0"
    V10_0 = "10.0"
    V12_0 = "12.0"
    V14_0 = "14.0"
    V15_0 = "15.0"
    V16_0 = "16.0"


FXCOP_VERSION_MAPPING = {
    FxCopVersion.ANY_DETECTED: "not_specified",
    FxCopVersion.V1_35: "1.35",
    FxCopVersion.V9_0: "9.0",
    FxCopVersion.V10_0: "10.0",
    FxCopVersion.V12_0: "12.0",
    FxCopVersion.V14_0: "14.0",
    FxCopVersion.V15_0: "15.0",
    FxCopVersion.V16_0: "16.0",
}


class FxCopInstallation(Variant):
    """Where the FxCop installation comes from."""


class AutoDetectedFxCop(FxCopInstallation):
    discriminator = "auto"

    version = EnumField(FxCopVersion, "fxcop.version", mapping=FXCOP_VERSION_MAPPING)


class ManualFxCop(FxCopInstallation):
    discriminator = "manual"

    installation_root = StringField("fxcop.root")


class FxCopInspectionSource(Variant):
    """What FxCop inspects."""


class Assemblies(FxCopInspectionSource):
    discriminator = "files"

    # Newline-separated wildcards
    files = StringField("fxcop.files")
    exclude = StringField("fxcop.files_exclude")


class FxCopProject(FxCopInspectionSource):
    discriminator = "project"

    project_file = StringField("fxcop.project")


def _flag(key: str) -> BoolField:
    return BoolField(key, true_value="true", false_value="")


class FxCopStep(BuildStep):
    """Runs FxCop static analysis on .NET assemblies."""

    type = "FxCop"

    fx_cop_installation = VariantSlot("fxcop.detection_mode", FxCopInstallation)
    inspection_source = VariantSlot("fxcop.what", FxCopInspectionSource)
    search_in_gac = _flag("fxcop.search_in_gac")
    search_in_dirs = StringField("fxcop.search_in_dirs")
    ignore_generated_code = _flag("fxcop.ignore_generated_code")
    report_xslt_file = StringField("fxcop.report_xslt")
    additional_options = StringField("fxcop.addon_options")
    fail_on_analysis_error = _flag("fxcop.fail_on_analysis_error")


# ============================================================================
# Echo runner
# ============================================================================


class EchoStep(BuildStep):
    """Sample runner that echoes a message on the agent."""

    type = "echoRunnerType"

    message = StringField()
