"""
Django settings, split per environment.

``base`` holds everything shared. ``dev``, ``test`` and ``prod`` star-import
it and override databases, hosts, secrets and logging.
"""
