"""
Workflow services for the Ebooks API.

Upload, view and listing workflows plus the helpers they share: filename
sanitation and the ownership check on object paths.
"""
