"""
Challonge Proxy - Gateway between the bracket client and the Challonge API

Responsibilities:
- Validate request parameters
- Resolve tournament identifiers (id or subdomain + name)
- Forward tournament, match and participant requests upstream
- Aggregate participants across tournaments (players-set)
"""
