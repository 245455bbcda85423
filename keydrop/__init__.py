"""
Keydrop

Anonymous file drop service. Uploads are stored under a public key for
download and a private key for deletion, and are evicted after a fixed
retention window.
"""

__version__ = "1.0.0"
