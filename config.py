"""
Environment configuration and Firebase initialisation
"""
import json
import logging
import os

import firebase_admin
from firebase_admin import credentials

FIREBASE_SERVICE_ACCOUNT = os.environ.get("FIREBASE_SERVICE_ACCOUNT")
FIREBASE_CREDENTIALS = os.environ.get("FIREBASE_CREDENTIALS", "/etc/secrets/firebase.json")
FIREBASE_DATABASE_URL = os.environ.get("FIREBASE_DATABASE_URL", "")
PORT = int(os.environ.get("PORT", 7000))
DEBUG = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level=None):
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def init_firebase():
    """Initialise the default Firebase app once; env JSON wins over the credentials file."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    try:
        if FIREBASE_SERVICE_ACCOUNT:
            cred = credentials.Certificate(json.loads(FIREBASE_SERVICE_ACCOUNT))
        else:
            cred = credentials.Certificate(FIREBASE_CREDENTIALS)
    except (ValueError, OSError) as e:
        raise RuntimeError(f"Firebase init failed: {e}") from e

    return firebase_admin.initialize_app(cred, {"databaseURL": FIREBASE_DATABASE_URL})
