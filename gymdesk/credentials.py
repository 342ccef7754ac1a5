import re
import secrets
import string
import unicodedata

from gymdesk.schemas import Credentials

PASSWORD_LENGTH = 6
PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def username_from_name(name: str) -> str:
    """
    Derive a login name from a display name: lower-cased, accents stripped,
    whitespace runs collapsed to "." and anything outside [a-z0-9.] dropped.

    >>> username_from_name("Miguel Rodríguez")
    'miguel.rodriguez'
    """
    decomposed = unicodedata.normalize("NFD", name.strip().lower())
    ascii_name = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    dotted = re.sub(r"\s+", ".", ascii_name)
    return re.sub(r"[^a-z0-9.]", "", dotted)


def random_password(length: int = PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def generate_credentials(name: str) -> Credentials:
    return Credentials(username=username_from_name(name), password=random_password())
