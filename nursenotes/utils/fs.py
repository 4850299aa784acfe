from pathlib import Path
import json
from typing import Any

def ensure_dir(folder: str | Path) -> Path:
    p = Path(folder)
    p.mkdir(parents=True, exist_ok=True)
    return p

def write_text(path: str | Path, content: str) -> str:
    file_path = Path(path)
    ensure_dir(file_path.parent)
    file_path.write_text(content or "", encoding="utf-8")
    # verify the write landed
    if not file_path.exists() or file_path.stat().st_size == 0 and (content or "") != "":
        raise RuntimeError(f"Write verification failed: {file_path}")
    return str(file_path)

def write_json(path: str | Path, data: Any) -> str:
    return write_text(path, json.dumps(data, ensure_ascii=False, indent=2))

def read_json(path: str | Path, default: Any = None) -> Any:
    p = Path(path)
    if not p.exists():
        return default
    return json.loads(p.read_text(encoding="utf-8"))
