import json
import os
import shutil
import tempfile
from pathlib import Path


def read_json(path, default):
    '''Load JSON from path. A missing file yields default; invalid JSON raises json.JSONDecodeError.'''
    if not os.path.exists(path):
        return default
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return default if data is None else data


def atomic_write_json(path, data):
    '''Write to a temp file in the same directory, then move it over path.'''
    path = Path(path)
    os.makedirs(path.parent, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(data, tmp, indent=2, ensure_ascii=False)
        shutil.move(tmp_path, str(path))
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


__all__ = ["read_json", "atomic_write_json"]
