"""
OAuth2/OIDC client registration, secrets and the versioned storage of redirect URIs.
"""
