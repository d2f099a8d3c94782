"""Post-download finalization: moving finished jobs and purging junk files.

Callers should import from `pipeline`.
"""
