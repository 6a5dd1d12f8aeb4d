"""
Business operations behind the HTTP routes.

Each service takes the acting user explicitly, consults the authorization
layer and runs its writes on the request's session.
"""
