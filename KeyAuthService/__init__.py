"""
KeyAuth Service Django project.
"""
