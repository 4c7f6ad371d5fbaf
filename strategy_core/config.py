"""
Configuration

Everything comes from environment variables. Database credentials can also
be pulled from AWS Secrets Manager (production) instead of a plain URL.
"""

import json
import logging
import os
from typing import Optional

import boto3

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = 'http://localhost:8000/run_strategy'
DEFAULT_DATABASE_URL = 'sqlite:///strategies.db'
DEFAULT_AWS_REGION = 'ca-west-1'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None) -> None:
    """Root logging setup for entrypoints (LOG_LEVEL env var, default INFO)"""
    log_level = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=LOG_FORMAT,
    )
    # Keep third-party chatter down
    for name in ('aiohttp', 'botocore', 'boto3', 'urllib3'):
        logging.getLogger(name).setLevel(logging.INFO)


def get_service_url() -> str:
    """Strategy execution endpoint"""
    return os.environ.get('STRATEGY_SERVICE_URL', DEFAULT_SERVICE_URL)


def get_database_url_from_secret(secret_arn: str) -> str:
    """Build a PostgreSQL URL from a Secrets Manager secret"""
    secrets_client = boto3.client(
        'secretsmanager', region_name=os.environ.get('AWS_REGION', DEFAULT_AWS_REGION)
    )
    try:
        response = secrets_client.get_secret_value(SecretId=secret_arn)
        secret = json.loads(response['SecretString'])

        host = secret.get('host')
        port = secret.get('port', 5432)
        database = secret.get('database', secret.get('dbname', 'postgres'))
        username = secret.get('username')
        password = secret.get('password')

        return f"postgresql://{username}:{password}@{host}:{port}/{database}"
    except Exception as e:
        logger.error(f"Error retrieving database credentials: {str(e)}")
        raise


def get_database_url() -> str:
    """
    Strategy store database URL

    Order: STRATEGY_DB_URL, then STRATEGY_DB_SECRET_ARN (Secrets Manager),
    then a local SQLite file.
    """
    url = os.environ.get('STRATEGY_DB_URL')
    if url:
        return url

    secret_arn = os.environ.get('STRATEGY_DB_SECRET_ARN')
    if secret_arn:
        logger.info("Loading database credentials from Secrets Manager")
        return get_database_url_from_secret(secret_arn)

    return DEFAULT_DATABASE_URL
