"""Credential Vault Meta information.
   Credential Vault keeps a bearer credential encrypted under a passphrase
   and hands it back in memory for a single use.
"""
__title__ = 'credential_vault'
__description__ = (
   'Credential Vault keeps a bearer credential encrypted under a '
   'passphrase in local storage.'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2024 Credential Vault Authors'
__author__ = 'Credential Vault Authors'
__author_email__ = 'maintainers@credential-vault.dev'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/credential-vault/credential-vault'
