__all__ = ["load_json"]


import json


def load_json(file, **kwargs):
    with open(file, "r") as f:
        return json.load(f, **kwargs)
