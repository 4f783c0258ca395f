"""
The typed resources of the Redfish API, and the machinery to sync them.

The generic machinery (decoding, entities, collections) knows nothing about
the specific resources; the specific resources (e.g. power) only declare
their fields, their writable fields, and their divergent fields.
"""
