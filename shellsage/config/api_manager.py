"""
API key management for ShellSage.

This module resolves the credential used for the remote service from
environment variables or the system keyring.
"""

import logging
import os
from typing import Optional

import keyring

# Constants
SERVICE_NAME = "shellsage"
API_KEY_NAME = "api_key"
ENV_VAR_NAMES = ("SHELLSAGE_API_KEY", "OPENAI_API_KEY")

logger = logging.getLogger(__name__)


def _is_missing_backend(error: Exception) -> bool:
    return "NoKeyringError" in str(type(error)) or "No recommended backend" in str(
        error
    )


def get_api_key() -> Optional[str]:
    """
    Retrieve the API key from environment variables or the keyring.

    Environment variables are checked first, in the order of ENV_VAR_NAMES.

    Returns:
        str or None: The API key if found, None otherwise.
    """
    for var_name in ENV_VAR_NAMES:
        api_key = os.environ.get(var_name)
        if api_key:
            logger.info(f"Using API key from environment variable {var_name}")
            return api_key

    try:
        return keyring.get_password(SERVICE_NAME, API_KEY_NAME)
    except Exception as e:
        # CI machines and containers often have no keyring backend at all
        if _is_missing_backend(e):
            logger.debug(f"Keyring backend not available: {str(e)}")
            return None
        raise


def save_api_key(api_key: str) -> bool:
    """
    Save the API key to the system keyring.

    Args:
        api_key (str): The API key to save.

    Returns:
        bool: True if successful, False otherwise.
    """
    if not is_api_key_valid(api_key):
        logger.error("Cannot save an empty or malformed API key")
        return False

    try:
        keyring.set_password(SERVICE_NAME, API_KEY_NAME, api_key)
        logger.info("API key saved successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to save API key: {str(e)}")
        return False


def delete_api_key() -> bool:
    """
    Delete the stored API key from the system keyring.

    Returns:
        bool: True if successful or nothing was stored, False otherwise.
    """
    try:
        keyring.delete_password(SERVICE_NAME, API_KEY_NAME)
        logger.info("API key deleted successfully")
        return True
    except keyring.errors.PasswordDeleteError:
        logger.info("No API key found to delete")
        return True
    except Exception as e:
        logger.error(f"Failed to delete API key: {str(e)}")
        return _is_missing_backend(e)


def is_api_key_valid(api_key: Optional[str]) -> bool:
    """
    Check that an API key is a non-empty string without surrounding whitespace.

    Args:
        api_key (str): The API key to validate.

    Returns:
        bool: True if the key looks usable, False otherwise.
    """
    if not api_key or not isinstance(api_key, str):
        return False
    return api_key == api_key.strip()
