"""Users app package.

Identity for the marketplace: customer users and hosts, their contact
verification codes, JWT authentication carrying the principal kind and the
permission classes keyed on it.
"""
