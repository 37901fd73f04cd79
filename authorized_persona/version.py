"""Authorized Persona Meta information."""

__title__ = "authorized-persona"
__description__ = "Tiered role-based authorization for aiohttp class-based views, with ordered persona tiers and per-view action grants."
__version__ = "0.3.1"
__author__ = "Jesus Lara"
__author_email__ = "jesuslarag@gmail.com"
__license__ = "MIT"
__copyright__ = "Copyright (c) 2020-2024 Jesus Lara"
