"""Session — page-lifetime guard, host environment model and session tokens.

The guard installs listeners on a host's event targets and hands back a
disposable handle; nothing is installed at import time.
"""
