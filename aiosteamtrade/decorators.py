"""Decorators for client/mixins methods"""

from .utils import attribute_required


api_key_required = attribute_required(
    "_api_key",
    "You must provide an API key to client before use this method",
)

session_id_required = attribute_required(
    "session_id",
    "You must provide a session id to client before use this method",
)
