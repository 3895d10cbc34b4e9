"""
HTTP layer of the Skill Events API.

``deps`` builds services around the store on ``app.state``; each
version subpackage (currently only ``v1``) exposes a ``router`` that
``create_app`` mounts under ``/api/<version>``.
"""
