"""Starter .verdiff.toml templates."""

DEFAULT_TOML = """\
# verdiff configuration
version = "1.0"

[versioning]
strategy = "semantic"     # semantic | timestamp | custom | branch

[diff]
style = "unified"         # unified | context | side-by-side
context_lines = 3
algorithm = "simple"      # simple | sequence

[report]
format = "terminal"       # terminal | json | markdown | html
# fail_on = "high"        # low | medium | high | critical
"""

FULL_TOML = DEFAULT_TOML + """
[versioning.timestamp]
format = "iso"            # iso | unix | readable
precision = "second"      # day | hour | minute | second | millisecond | microsecond
timezone = "UTC"
prefix = ""
suffix = ""

[versioning.custom]
# pattern = "{year}.{release}-{channel}"
# validation = "^\\\\d{4}\\\\.\\\\d+-[a-z]+$"

[changes]
# include_patterns = ["src/*"]
# exclude_patterns = ["*.test.*", "*.spec.*"]
"""
