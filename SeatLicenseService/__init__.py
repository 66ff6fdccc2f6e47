"""
Seat License Service Django project.
"""
