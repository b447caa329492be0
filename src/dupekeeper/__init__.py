# Licensed under the Apache License, Version 2.0
"""dupekeeper - content-addressed file deduplication."""

__version__ = "0.1.0"
