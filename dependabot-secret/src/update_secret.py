#!/usr/bin/env python3
"""
Update a single Dependabot secret in a GitHub repository.

Inputs come from the INPUT_* environment variables GitHub Actions sets for
an action's `with:` block, and can be overridden on the command line.
"""
import argparse
import json
import logging
import os
import sys
from collections import namedtuple

import boto3

from dependabot_secrets import update_dependabot_secret
from github_client import DEFAULT_API_URL, GitHubClient

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Initialize AWS Secrets Manager client
secrets_client = boto3.client('secretsmanager', region_name=os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION', 'eu-west-1'))

REQUIRED_INPUTS = ('token', 'owner', 'repo', 'secret_name', 'secret_value')
OPTIONAL_INPUTS = ('api_url', 'token_secret_id')

Config = namedtuple('Config', ['token', 'owner', 'repo', 'secret_name', 'secret_value', 'api_url'])


class ConfigurationError(Exception):
    """A required input is missing"""


def get_input(name, environ):
    """Read an action input the way the Actions runner exposes it"""
    value = environ.get(f"INPUT_{name.replace(' ', '_').upper()}", '')
    return value.strip()


def get_token_from_secrets_manager(secret_id):
    """
    Retrieve the GitHub token from an AWS Secrets Manager JSON bundle
    """
    try:
        response = secrets_client.get_secret_value(SecretId=secret_id)
        return json.loads(response['SecretString'])['github_token']
    except Exception as e:
        logger.error(f"Failed to retrieve GitHub token from Secrets Manager: {e}")
        raise


def build_parser():
    parser = argparse.ArgumentParser(description="Encrypt a value and store it as a Dependabot secret")
    parser.add_argument("--token", help="GitHub token with access to the repository's Dependabot secrets")
    parser.add_argument("--owner", help="Repository owner")
    parser.add_argument("--repo", help="Repository name")
    parser.add_argument("--secret-name", dest="secret_name", help="Name of the Dependabot secret")
    parser.add_argument("--secret-value", dest="secret_value", help="Plaintext secret value")
    parser.add_argument("--api-url", dest="api_url", help="GitHub API base URL")
    parser.add_argument("--token-secret-id", dest="token_secret_id",
                        help="AWS Secrets Manager secret holding a github_token, used when no token is given")
    return parser


def load_config(argv=None, environ=None):
    """
    Collect the inputs for one run.

    Command-line flags win over INPUT_* variables. Raises ConfigurationError
    for the first required input that is missing or empty, before any
    network call except the optional Secrets Manager token lookup.
    """
    environ = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    values = {}
    for name in REQUIRED_INPUTS + OPTIONAL_INPUTS:
        value = getattr(args, name)
        values[name] = value if value else get_input(name, environ)

    for name in REQUIRED_INPUTS[1:]:
        if not values[name]:
            raise ConfigurationError(f"Input required and not supplied: {name}")

    if not values['token'] and values['token_secret_id']:
        values['token'] = get_token_from_secrets_manager(values['token_secret_id'])
    if not values['token']:
        raise ConfigurationError("Input required and not supplied: token")

    api_url = values['api_url'] or environ.get('GITHUB_API_URL') or DEFAULT_API_URL

    return Config(
        token=values['token'],
        owner=values['owner'],
        repo=values['repo'],
        secret_name=values['secret_name'],
        secret_value=values['secret_value'],
        api_url=api_url
    )


def escape_data(value):
    """Escape workflow command data so the runner reads it back verbatim"""
    return value.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def mask_value(value):
    """Ask the Actions runner to redact the value from all later output"""
    for line in value.splitlines():
        if line.strip():
            print(f"::add-mask::{escape_data(line)}")


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(message)s', stream=sys.stdout)

    try:
        config = load_config(argv)
        mask_value(config.secret_value)

        client = GitHubClient(config.token, api_url=config.api_url)
        update_dependabot_secret(
            client,
            config.owner,
            config.repo,
            config.secret_name,
            config.secret_value
        )
        return 0

    except Exception as e:
        message = str(e) or 'An unknown error occurred'
        print(f"::error::{escape_data(message)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
