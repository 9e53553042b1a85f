import logging
from collections import namedtuple

from github_client import GITHUB_API_VERSION
from secret_sealer import SecretSealer

# Configure logging
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

PUBLIC_KEY_PATH = '/repos/{owner}/{repo}/dependabot/secrets/public-key'
SECRET_PATH = '/repos/{owner}/{repo}/dependabot/secrets/{secret_name}'

API_HEADERS = {'X-GitHub-Api-Version': GITHUB_API_VERSION}

RemoteEncryptionKey = namedtuple('RemoteEncryptionKey', ['key_id', 'key'])


def fetch_public_key(client, owner, repo):
    """
    Fetch the public key used to encrypt the repository's Dependabot secrets
    """
    response = client.execute('GET', PUBLIC_KEY_PATH, {
        'owner': owner,
        'repo': repo,
        'headers': dict(API_HEADERS)
    })
    return RemoteEncryptionKey(
        key_id=response.data['key_id'],
        key=response.data['key']
    )


def publish_secret(client, owner, repo, secret_name, encrypted_value, key_id):
    """
    Create or overwrite a Dependabot secret with an already sealed value.

    GitHub answers 201 for a new secret and 204 for an update; the body is
    never read.
    """
    client.execute('PUT', SECRET_PATH, {
        'owner': owner,
        'repo': repo,
        'secret_name': secret_name,
        'encrypted_value': encrypted_value,
        'key_id': key_id,
        'headers': dict(API_HEADERS)
    })


def update_dependabot_secret(client, owner, repo, secret_name, secret_value, sealer=None):
    """
    Fetch the repository key, seal the value under it and publish the result.

    Any failure stops the run at the step that raised; nothing is retried.
    """
    sealer = sealer or SecretSealer()

    logger.info(f"Fetching public key for {owner}/{repo}...")
    public_key = fetch_public_key(client, owner, repo)

    logger.info("Encrypting secret value...")
    encrypted_value = sealer.seal(secret_value, public_key.key)

    logger.info(f"Updating Dependabot secret '{secret_name}'...")
    publish_secret(client, owner, repo, secret_name, encrypted_value, public_key.key_id)

    logger.info(f"✓ Successfully updated Dependabot secret '{secret_name}' in {owner}/{repo}")
