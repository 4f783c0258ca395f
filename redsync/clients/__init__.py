"""
All the routines to talk to the Redfish API.

The resource models only need two operations from the transport
(see `redsync.clients.api.RemoteClient`): to get the raw document
by its URI, and to patch a resource at its URI. Everything else here
(sessions, SSL, authentication, error classification) is an implementation
detail of the default aiohttp-based client, and can be replaced with
anything else that implements the same protocol.
"""
