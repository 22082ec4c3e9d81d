"""
Script: release_tools package
What: Holds the Python helpers that keep the vida fork in step with upstream.
Doing: Groups the sync, tagging, and release-verification commands with their shared helpers.
Why: Keeps release logic readable and testable instead of spreading it across shell scripts.
Goal: Provide one maintainable home for fork sync and release verification.
"""
