"""
Camtrap DP table contracts: typed records, field codecs, schemas and CSV I/O.

Handles decoding deployments, media and observations tables into validated
records (strict or best-effort) and writing them back in canonical form.
"""
