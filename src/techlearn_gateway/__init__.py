"""TechLearn auth gateway.

HTTP service that registers users, signs them in, refreshes access tokens
and revokes refresh sessions. Built on the reusable pieces in
techlearn_auth and configured through techlearn_config.
"""
