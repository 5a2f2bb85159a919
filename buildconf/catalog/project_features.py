"""Project features: connections to AWS and Azure DevOps."""

from buildconf.entity import Connection
from buildconf.fields import BoolField, StringField
from buildconf.variants import Variant, VariantSlot

__all__ = [
    "AwsConnection",
    "AwsCredentialsType",
    "AzureDevOpsOAuthConnection",
    "DefaultAwsCredentials",
    "IamRoleCredentials",
    "StaticCredentials",
]


class AwsCredentialsType(Variant):
    """Source of the credentials an AWS connection hands out."""


class StaticCredentials(AwsCredentialsType):
    """Access key pair, optionally exchanged for session credentials."""

    discriminator = "awsAccessKeys"

    access_key_id = StringField("awsAccessKeyId", required=True)
    secret_access_key = StringField("secure:awsSecretAccessKey", required=True)
    use_session_credentials = BoolField("awsSessionCredentials")
    sts_endpoint = StringField("awsStsEndpoint")


class IamRoleCredentials(AwsCredentialsType):
    """Role assumed through another AWS connection."""

    discriminator = "awsAssumeIamRole"

    role_arn = StringField("awsIamRoleArn", required=True)
    session_name = StringField("awsIamRoleSessionName")
    aws_connection_id = StringField()
    sts_endpoint = StringField("awsStsEndpoint")


class DefaultAwsCredentials(AwsCredentialsType):
    """Default credential provider chain of the server."""

    discriminator = "defaultProvider"


class AwsConnection(Connection):
    provider_type = "AWS"

    name = StringField("displayName")
    region_name = StringField("awsRegionName")
    project_feature_id = StringField()
    credentials_type = VariantSlot("awsCredentialsType", AwsCredentialsType)


class AzureDevOpsOAuthConnection(Connection):
    """OAuth application registered in Azure DevOps."""

    provider_type = "AzureDevOps"

    display_name = StringField()
    azure_dev_ops_url = StringField()
    application_id = StringField()
    client_secret = StringField("secure:clientSecret")
    scope = StringField()
