"""WSGI entrypoint: ``gunicorn -c deploy/gunicorn.conf.py wsgi:app``."""

from lighthouse import create_app, enforce_schema_contract

app = create_app()
enforce_schema_contract(app)
