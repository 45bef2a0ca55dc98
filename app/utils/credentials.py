"""Bootstrap the GA4 service-account file from environment variables.

On Render (and similar PaaS), credential JSON files can't be committed
to git.  Instead, the key material lives in env vars and this module
writes it to ``settings.ga4_credentials_path`` at startup.

Checked in order:

    GA4_CREDENTIALS_JSON    full service-account JSON
    GA4_CREDENTIALS_PATH    if the value looks like JSON rather than a path
    GOOGLE_SA_JSON          shared service account for every Google API

    GOOGLE_CLIENT_EMAIL + GOOGLE_PRIVATE_KEY (+ GOOGLE_PROJECT_ID)
                            split key material; escaped ``\\n`` sequences in
                            the private key are restored to newlines
"""
import json
import os
from typing import Mapping, Optional

from app.config import get_settings
from app.utils.logger import log

_JSON_VARS = ("GA4_CREDENTIALS_JSON", "GA4_CREDENTIALS_PATH", "GOOGLE_SA_JSON")

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _is_json(value: str) -> bool:
    """Check if a string looks like JSON content (not a file path)."""
    stripped = value.strip()
    return stripped.startswith("{") and stripped.endswith("}")


def _from_split_vars(environ: Mapping[str, str]) -> Optional[str]:
    client_email = environ.get("GOOGLE_CLIENT_EMAIL", "")
    private_key = environ.get("GOOGLE_PRIVATE_KEY", "")
    if not client_email or not private_key:
        return None

    info = {
        "type": "service_account",
        "project_id": environ.get("GOOGLE_PROJECT_ID", ""),
        "client_email": client_email,
        "private_key": private_key.replace("\\n", "\n"),
        "token_uri": GOOGLE_TOKEN_URI,
    }
    return json.dumps(info)


def bootstrap_credentials(
    environ: Optional[Mapping[str, str]] = None,
    file_path: Optional[str] = None,
) -> Optional[str]:
    """Write the GA4 credential file from env vars if it doesn't exist.

    Returns the path written, or None when nothing was written (file
    already present, or no usable env var).
    """
    environ = os.environ if environ is None else environ
    file_path = file_path or get_settings().ga4_credentials_path

    if os.path.exists(file_path):
        log.info(f"Credential file {file_path} already exists, skipping")
        return None

    json_str = None
    source_var = None
    for var in _JSON_VARS:
        value = environ.get(var, "")
        if value and _is_json(value):
            json_str = value
            source_var = var
            break

    if not json_str:
        json_str = _from_split_vars(environ)
        source_var = "GOOGLE_CLIENT_EMAIL/GOOGLE_PRIVATE_KEY"

    if not json_str:
        log.warning("No GA4 credentials found in environment")
        return None

    try:
        json.loads(json_str)  # Validate it's real JSON
    except json.JSONDecodeError:
        log.error(f"{source_var} is not valid JSON, skipping")
        return None

    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(file_path, "w") as f:
        f.write(json_str)
    log.info(f"Wrote {file_path} from {source_var}")
    return file_path
