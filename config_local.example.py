# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for secrets. This file should contain only safe overrides.
Only TARGET_LISTS, GENERATE_SUBTASKS and LLM_MODELS are read.
"""

# Example: reorder a different set of lists (exact, case-sensitive titles)
# TARGET_LISTS = ["Backlog", "In Progress", "Waiting On"]

# Example: also create AI-suggested subtasks for top-level tasks
# GENERATE_SUBTASKS = True

# Example: change model order
# LLM_MODELS = [
#     "gemini-2.0-flash",
# ]
