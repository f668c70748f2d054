from flask import request


def json_object():
    """The request's JSON body when it is an object, else an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def text_field(data, key):
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""
