"""
nodesource/auth - AWS 자격 증명 서브시스템

Usage:
    from nodesource.auth import acquire_session
"""

from .credentials import acquire_session

__all__ = ["acquire_session"]
