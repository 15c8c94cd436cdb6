"""
End-user consent capture for OAuth2/OIDC authorization requests.
"""
