"""
All the structures and pure-data helpers: raw wire bodies, diffs, patches,
credentials, and settings.

All the functions here are purely data-manipulative and computational.
They make no API calls and do no logging on their own.
"""
