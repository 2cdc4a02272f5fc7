"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda keeps the SQLAlchemy engine warm across routes.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from typing import Dict

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_ec2 as ec2,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct

ROUTES = (
    (apigw.HttpMethod.GET, "/health"),
    (apigw.HttpMethod.GET, "/reminders"),
    (apigw.HttpMethod.POST, "/reminders/{id}/complete"),
    (apigw.HttpMethod.GET, "/customers"),
    (apigw.HttpMethod.POST, "/customers"),
    (apigw.HttpMethod.GET, "/customers/{id}"),
    (apigw.HttpMethod.PUT, "/customers/{id}"),
    (apigw.HttpMethod.DELETE, "/customers/{id}"),
    (apigw.HttpMethod.POST, "/customers/{id}/actions"),
    (apigw.HttpMethod.GET, "/visits"),
    (apigw.HttpMethod.POST, "/visits"),
    (apigw.HttpMethod.GET, "/reports/stats"),
    (apigw.HttpMethod.GET, "/reports/daily"),
    (apigw.HttpMethod.POST, "/reports/daily/send"),
    (apigw.HttpMethod.GET, "/dashboard/today"),
)


def bundled_source() -> _lambda.Code:
    """Lambda code from src/ with runtime dependencies installed alongside."""
    return _lambda.Code.from_asset(
        "src",
        bundling=BundlingOptions(
            image=_lambda.Runtime.PYTHON_3_12.bundling_image,
            command=[
                "bash", "-c",
                "pip install sqlalchemy psycopg2-binary python-json-logger pydantic "
                "-t /asset-output && cp -r . /asset-output"
            ],
        ),
    )


class ApiLayerConstruct(Construct):
    """Expose the CRM endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        vpc: ec2.IVpc,
        code: _lambda.Code,
        lambda_env: Dict[str, str],
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 15,
    ) -> None:
        super().__init__(scope, construct_id)

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_ISOLATED),
            environment=lambda_env,
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        # HTTP API with minimal latency and low cost.
        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"crm-reminders-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["authorization", "content-type"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        for method, path in ROUTES:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
