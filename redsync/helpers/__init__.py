"""
General-purpose helpers not related to the Redfish domain itself,
which are used to prepare and control the runtime environment.

Helpers do not depend on anything else in the package.
"""
