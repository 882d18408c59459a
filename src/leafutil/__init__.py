"""
leafutil: small, independent utility helpers.

Modules:
    values      default picking and zero-value detection
    files       single-file operations
    dirs        directory copy/cleanup/listing
    symlinks    symlink recreation
    paths       path expansion and project-root discovery
    validation  dataclass field validation
    dates       date layout parsing
    loaders     YAML/JSON file loading

Every function is a leaf: nothing here holds state between calls.
"""

__version__ = "0.1.0"
