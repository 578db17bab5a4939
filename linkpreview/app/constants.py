"""Service-level constants shared across modules."""
from __future__ import annotations

import re

CURRENCY_MARKER = "원"

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 300

# Interstitial titles served by anti-bot walls (Cloudflare and friends).
BOT_CHALLENGE_TITLE_PATTERN = re.compile(r"just a moment|please wait", re.IGNORECASE)

BROWSER_STRATEGY = "browser"
