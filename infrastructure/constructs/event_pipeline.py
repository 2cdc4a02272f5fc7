"""
Event pipeline: EventBridge schedule -> daily digest Lambda -> SES / SNS.
"""

from typing import Dict

from aws_cdk import (
    Duration,
    aws_ec2 as ec2,
    aws_events as events,
    aws_events_targets as targets,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_logs as logs,
    aws_sns as sns,
)
from constructs import Construct


class EventPipelineConstruct(Construct):
    """Run the morning digest on a fixed schedule."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        vpc: ec2.IVpc,
        code: _lambda.Code,
        lambda_env: Dict[str, str],
        hour_utc: int,
        minute_utc: int = 0,
    ) -> None:
        super().__init__(scope, construct_id)

        self.notification_topic = sns.Topic(
            self,
            "DailyTasksTopic",
            display_name=f"CRM daily tasks ({environment})",
        )

        self.digest_lambda = _lambda.Function(
            self,
            "DailyDigestHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.daily_digest.lambda_handler",
            code=code,
            timeout=Duration.seconds(60),
            memory_size=256,
            architecture=_lambda.Architecture.X86_64,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_ISOLATED),
            environment={
                **lambda_env,
                "NOTIFICATION_TOPIC_ARN": self.notification_topic.topic_arn,
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        self.notification_topic.grant_publish(self.digest_lambda)
        self.digest_lambda.add_to_role_policy(
            iam.PolicyStatement(actions=["ses:SendEmail", "ses:SendRawEmail"], resources=["*"])
        )

        events.Rule(
            self,
            "DailyDigestSchedule",
            schedule=events.Schedule.cron(minute=str(minute_utc), hour=str(hour_utc)),
            targets=[targets.LambdaFunction(self.digest_lambda)],
        )
