from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path

from models import DetailedProject, KeyFact, NextStep
from targets import DETAILED_PROJECTS_KEY, KEY_FACTS_KEY, NEXT_STEPS_KEY

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")


class JsonDocumentStore:
    """Whole-document JSON storage, one file per key. Last writer wins."""

    def __init__(self, base_dir: str | Path = DEFAULT_DATA_DIR):
        self.base_dir = Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def load(self, key: str, default=None):
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Failed to read document %s: %s", key, e)
            return default

    def save(self, key: str, value) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")


def _load_entries(store: JsonDocumentStore, key: str) -> list[dict]:
    data = store.load(key, [])
    if not isinstance(data, list):
        logger.error("Document %s is not a list; ignoring it", key)
        return []
    return [item for item in data if isinstance(item, dict)]


def _new_id(existing: set, prefix: str = "proj") -> str:
    while True:
        candidate = f"{prefix}_{uuid.uuid4().hex[:8]}"
        if candidate not in existing:
            return candidate


# --- Monitored projects ---

def load_detailed_projects(store: JsonDocumentStore) -> list[DetailedProject]:
    return [DetailedProject.from_dict(p) for p in _load_entries(store, DETAILED_PROJECTS_KEY)]


def save_detailed_project(store: JsonDocumentStore, project: DetailedProject) -> DetailedProject:
    """Insert (no id yet) or replace (same id) a monitored project and return the stored copy."""
    if not project.name.strip():
        raise ValueError("O nome do projeto é obrigatório.")
    projects = load_detailed_projects(store)
    if project.id is None:
        project.id = _new_id({p.id for p in projects})
        projects.append(project)
    else:
        for idx, existing in enumerate(projects):
            if existing.id == project.id:
                projects[idx] = project
                break
        else:
            projects.append(project)
    store.save(DETAILED_PROJECTS_KEY, [p.to_dict() for p in projects])
    return project


# --- Key facts ---

def load_key_facts(store: JsonDocumentStore) -> list[KeyFact]:
    return [KeyFact.from_dict(f) for f in _load_entries(store, KEY_FACTS_KEY)]


def add_key_fact(store: JsonDocumentStore, text: str, logo_url: str = "") -> KeyFact | None:
    if not (text or "").strip():
        return None
    facts = load_key_facts(store)
    fact = KeyFact(id=_new_id({f.id for f in facts}, "fact"), text=text, logo_url=(logo_url or "").strip())
    facts.append(fact)
    store.save(KEY_FACTS_KEY, [f.to_dict() for f in facts])
    return fact


def remove_key_fact(store: JsonDocumentStore, fact_id: str) -> None:
    facts = [f for f in load_key_facts(store) if f.id != fact_id]
    store.save(KEY_FACTS_KEY, [f.to_dict() for f in facts])


# --- Next steps ---

def load_next_steps(store: JsonDocumentStore) -> list[NextStep]:
    return [NextStep.from_dict(s) for s in _load_entries(store, NEXT_STEPS_KEY)]


def add_next_step(store: JsonDocumentStore, project: str, description: str) -> NextStep | None:
    if not (project or "").strip() or not (description or "").strip():
        return None
    steps = load_next_steps(store)
    step = NextStep(id=_new_id({s.id for s in steps}, "step"), project=project, description=description)
    steps.append(step)
    store.save(NEXT_STEPS_KEY, [s.to_dict() for s in steps])
    return step


def remove_next_step(store: JsonDocumentStore, step_id: str) -> None:
    steps = [s for s in load_next_steps(store) if s.id != step_id]
    store.save(NEXT_STEPS_KEY, [s.to_dict() for s in steps])
