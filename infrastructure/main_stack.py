"""
Main CDK Stack for the CRM reminders backend.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
    aws_iam as iam,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct, bundled_source
from infrastructure.constructs.event_pipeline import EventPipelineConstruct
from infrastructure.config.settings import Settings


class CrmStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "crm-reminders")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Network + database.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
            db_instance_class=settings.db_instance_class,
            db_allocated_storage=settings.db_allocated_storage,
            db_name=settings.db_name,
        )

        code = bundled_source()
        lambda_env = {
            "ENVIRONMENT": settings.environment,
            "DB_SECRET_ARN": data_construct.db_secret.secret_arn,
            "DEFAULT_CALL_INTERVAL_DAYS": str(settings.default_call_interval_days),
            "DEFAULT_VISIT_INTERVAL_DAYS": str(settings.default_visit_interval_days),
        }
        if settings.report_recipient:
            lambda_env["REPORT_RECIPIENT"] = settings.report_recipient
        if settings.report_sender:
            lambda_env["REPORT_SENDER"] = settings.report_sender

        # 2) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            vpc=data_construct.vpc,
            code=code,
            lambda_env=lambda_env,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # 3) Scheduled daily digest.
        event_construct = EventPipelineConstruct(
            self,
            "EventPipeline",
            environment=settings.environment,
            vpc=data_construct.vpc,
            code=code,
            lambda_env=lambda_env,
            hour_utc=settings.digest_hour_utc,
            minute_utc=settings.digest_minute_utc,
        )

        # Database access for both Lambdas.
        for fn in (api_construct.main_lambda, event_construct.digest_lambda):
            data_construct.db_secret.grant_read(fn)
            data_construct.db_instance.connections.allow_default_port_from(fn)

        # The API can send the digest on demand too.
        api_construct.main_lambda.add_to_role_policy(
            iam.PolicyStatement(actions=["ses:SendEmail", "ses:SendRawEmail"], resources=["*"])
        )

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "DbSecretArn", value=data_construct.db_secret.secret_arn)
        CfnOutput(
            self,
            "DailyTasksTopicArn",
            value=event_construct.notification_topic.topic_arn,
        )
