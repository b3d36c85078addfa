"""Keydude Meta information.
   Keydude protects application secrets and JSON data with
   passphrase-wrapped AES-256-GCM keys.
"""
__title__ = 'keydude'
__description__ = (
   'Passphrase-wrapped AES-256-GCM keys and authenticated '
   'envelopes for application secrets and JSON data.'
)
__version__ = '0.3.0'
__license__ = 'Apache-2.0'
