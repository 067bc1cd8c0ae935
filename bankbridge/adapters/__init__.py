"""Adapter package for the banking partner REST API.

Purpose:
    Translate domain operations into partner requests and partner JSON into
    typed records (``bank_rest.BankRestAdapter`` is the facade).

Dependencies:
    ``http_client`` depends on ``requests``; every other module is pure and
    only depends on ``bankbridge.domain``.

Call context:
    Imported by composition code (``BankRestAdapter.from_config``) and by
    tests, which inject stub transports.
"""
