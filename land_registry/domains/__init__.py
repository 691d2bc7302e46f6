"""Domain layer: documents, form validation and the error taxonomy.

Domain modules do not depend on UI or on the remote clients.
"""
