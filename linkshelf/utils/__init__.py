"""
Common utilities: authentication, logging, login throttling and text helpers.

Submodules are imported directly (``linkshelf.utils.auth`` etc.); the
configuration module depends on ``linkshelf.utils.logger``, so this package
must not import anything that reads settings.
"""
