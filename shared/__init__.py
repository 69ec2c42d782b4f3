"""
Shared API kernel

Helpers used by every EventO app: the response envelope, the page/limit
paginator and the exception handler that maps errors onto it.
"""
