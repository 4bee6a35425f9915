"""WSGI entrypoint for Passenger-style hosting."""

from davko.backend.app import create_app

# Passenger looks up a module-level ``application`` callable.
application = create_app()
