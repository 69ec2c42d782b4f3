"""Bookings app package.

A booking reserves a venue and/or services for an event on behalf of a
user. This app owns the booking model, its lifecycle (pending, confirmed,
cancelled, completed) and the API through which users create bookings and
hosts move them along.
"""
