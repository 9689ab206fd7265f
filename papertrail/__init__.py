"""papertrail: assemble release changelogs from independently-authored fragments."""

__version__ = "0.4.0"
