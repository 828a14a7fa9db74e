# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "AIRDROP_APP_NAME": "App display name (default: airdrop-tracker).",
    "AIRDROP_LOG_LEVEL": "Logging level (default: INFO).",
    # Hosted backend
    "AIRDROP_BACKEND_URL": "Backend base URL (fallback: NEXT_PUBLIC_SUPABASE_URL).",
    "AIRDROP_BACKEND_ANON_KEY": "Public anon key (fallback: NEXT_PUBLIC_SUPABASE_ANON_KEY).",
    "AIRDROP_ACCESS_TOKEN": "Session access token of the signed-in user (optional).",
    "AIRDROP_USER_ID": "User id of the signed-in user (optional, pairs with the token).",
    "AIRDROP_REQUEST_TIMEOUT_SECONDS": "HTTP read timeout (default: 10).",
    # Progress tracking
    "AIRDROP_PROGRESS_SOURCE": "remote | local | auto (default: auto = remote when signed in).",
    "AIRDROP_PRUNE_STALE_PROGRESS": "Drop past days from task_progress on toggle (true/false).",
    # Paths (gitignored)
    "AIRDROP_DATA_DIR": "Local data directory (default: .local/airdrop).",
    "AIRDROP_CACHE_DB_PATH": "Local completion cache (default: <data_dir>/local_cache.sqlite3).",
}
