"""
faultmap CLI.

The `fm` command inspects the built-in taxonomy and dry-runs fault
classification.

Usage:
    fm tree
    fm classify <KIND[:MESSAGE]>...
"""

__version__ = "0.1.0"
__cli_name__ = "fm"
