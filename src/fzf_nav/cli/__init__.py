"""fzf-nav CLI.

Usage:
    fzf-nav recent-dirs [N]         Recent directory visits
    fzf-nav recent-files [N]        Recent file opens
    fzf-nav popular-dirs [N]        Most visited directories
    fzf-nav file-stats              File opens per category
    fzf-nav search <query>          Search history paths
    fzf-nav change-to-dir [N]       Pick a recent directory with fzf
"""

from fzf_nav.cli.main import app, main

__all__ = ["app", "main"]
