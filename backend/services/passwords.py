"""
Politique de mot de passe
"""

import re

PASSWORD_POLICY_REGEX = re.compile(
    r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[!@#$%^&*(),.?":{}|<>]).{8,}$'
)

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters with uppercase, lowercase, "
    "number and special character"
)


def check_password_strength(password: str) -> bool:
    """8 caractères min, une majuscule, une minuscule, un chiffre, un spécial"""
    return bool(password) and PASSWORD_POLICY_REGEX.match(password) is not None
