# 📄 File: freeexperience/shared/core/security.py
#
# 🧭 Purpose (Layman Explanation):
# Scrambles passwords before they are saved in the local notebook and checks a typed
# password against the scrambled copy.
#
# 🧪 Purpose (Technical Summary):
# Password hashing for the local backend, which keeps its own account registry when the
# remote identity provider is not configured.
#
# 🔗 Dependencies:
# passlib (CryptContext, pbkdf2_sha256)
#
# 🔄 Connected Modules / Calls From:
# LocalSessionStore, DualBackendStore factory

import logging
from functools import lru_cache

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordHasher:
    """
    Hashes and verifies account passwords for the local account registry.
    """

    def hash_password(self, password: str) -> str:
        """
        Hash password using PBKDF2-SHA256.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password
        """
        hashed = pwd_context.hash(password)
        logger.debug("Password hashed successfully")
        return hashed

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify password against hash.

        Args:
            plain_password: Plain text password
            hashed_password: Stored hashed password

        Returns:
            bool: True if password matches
        """
        try:
            is_valid = pwd_context.verify(plain_password, hashed_password)
            if is_valid:
                logger.debug("Password verification successful")
            else:
                logger.debug("Password verification failed")
            return is_valid
        except (ValueError, TypeError) as e:
            logger.error(f"Password verification error: {e}")
            return False


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    """Get the shared password hasher."""
    return PasswordHasher()
