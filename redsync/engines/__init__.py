"""
Engines are the ambient machinery around the resources: currently, logging.

They are not specific to any resource type, and are used by the models
and by the command-line interface alike.
"""
