"""Notifications app package.

Email and SMS delivery for booking events. Every booking event is fanned out
to the user and the hosts it references at most once, recorded in the
dispatch ledger.
"""
