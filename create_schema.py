#!/usr/bin/env python3
"""Create the CRM tables on the deployed RDS instance (or DATABASE_URL)."""

import os
import sys
from pathlib import Path

import boto3

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from repositories.db import get_db_engine  # noqa: E402
from repositories.schema import create_schema  # noqa: E402


def main():
    if not os.environ.get("DATABASE_URL") and not os.environ.get("DB_SECRET_ARN"):
        # Look the secret up from the stack outputs.
        stack_name = f"CrmRemindersStack-{os.environ.get('ENVIRONMENT', 'dev')}"
        cf = boto3.client("cloudformation")
        try:
            resp = cf.describe_stacks(StackName=stack_name)
            outputs = {o["OutputKey"]: o["OutputValue"] for o in resp["Stacks"][0]["Outputs"]}
            os.environ["DB_SECRET_ARN"] = outputs["DbSecretArn"]
        except Exception as e:
            print(f"Error getting database secret from {stack_name}: {e}")
            sys.exit(1)

    engine = get_db_engine()
    if engine is None:
        print("Could not resolve database credentials")
        sys.exit(1)

    print(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    create_schema(engine)
    print("Schema is up to date.")


if __name__ == "__main__":
    main()
