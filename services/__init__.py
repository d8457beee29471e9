"""
Side-effect collaborators: email notifications, PDF contracts and image storage.
"""
