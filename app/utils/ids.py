"""Identifier helpers"""

import uuid


def generate_id() -> str:
    """32 character hex identifier used as primary key"""
    return uuid.uuid4().hex
