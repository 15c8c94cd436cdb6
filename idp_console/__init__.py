"""
Identity provider console: OAuth2/OIDC client administration and end-user consent capture.
"""
