"""REST endpoint modules.

Each module maps one backend resource to plain async functions taking a
:class:`~pygeofence._transport.Transport`.  ``GeofenceClient`` is the
public entry point.
"""
