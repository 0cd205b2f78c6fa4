"""
Source adapters that supply table text to the reader and accept it from the writer.

Local files, in-memory buffers and HTTP(S) URLs. Kept apart from the
conversion core, which only handles already-available text.
"""
