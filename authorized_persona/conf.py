"""Authorized Persona configuration.

Settings are read through navconfig, so they can be provided by the
environment, the ``env/.env`` file or any navconfig backend.
"""
from navconfig import config


# Attribute read from a Persona to obtain its current tier.
AUTHORIZATION_TIER_ATTRIBUTE = config.get(
    'AUTHORIZATION_TIER_ATTRIBUTE',
    fallback='authorization_tier'
)

# Denial responses:
AUTHORIZATION_DENIED_MESSAGE = config.get(
    'AUTHORIZATION_DENIED_MESSAGE',
    fallback='You are not authorized to perform this action.'
)
AUTHORIZATION_FALLBACK_URL = config.get(
    'AUTHORIZATION_FALLBACK_URL',
    fallback='/'
)
AUTHORIZATION_FLASH_KEY = config.get(
    'AUTHORIZATION_FLASH_KEY',
    fallback='flash'
)
