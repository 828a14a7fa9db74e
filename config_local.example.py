# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for secrets. This file should contain only safe overrides.
"""

# Example: keep today's checkmarks on this machine only
# PROGRESS_SOURCE = "local"

# Example: keep only today's entry in task_progress
# PRUNE_STALE_PROGRESS = True
