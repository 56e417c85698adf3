import re
import secrets
import time
import unicodedata


def generate_reset_code(length: int = 6) -> str:
    """Short uppercase hex code mailed to users for password recovery."""
    return secrets.token_hex((length + 1) // 2)[:length].upper()


def generate_upload_filename(original_name: str) -> str:
    """
    Build ``<epoch-ms>-<sanitized-name>`` for a stored upload.

    Directory parts are dropped, whitespace becomes ``_`` and anything other
    than letters, digits, dot, dash and underscore is removed.
    """
    name = original_name.replace("\\", "/").split("/")[-1]
    name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("utf-8")
    name = re.sub(r"\s+", "_", name.strip())
    name = re.sub(r"[^A-Za-z0-9._-]", "", name).lstrip(".")
    if not name:
        name = "document"
    return f"{int(time.time() * 1000)}-{name}"
