"""ASGI entrypoint for the tourism portal.

The portal is a local, single-user client: one process holds one session and
one set of dashboards, and every caller that reaches the port shares them.
Serve it on the loopback interface only::

    uvicorn zanzibar_tours.api.asgi:app --host 127.0.0.1
"""

from zanzibar_tours.api.app import create_app
from zanzibar_tours.containers import build_container

app = create_app(build_container())
