"""Data models for imported CSV projects and user-maintained monitored projects."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from targets import DEFAULT_STEP_NAMES

# Column headers of the CSV export, in display order
CSV_COLUMNS = ['CLIENTE', 'TIPO DE PROJETO', 'TIPO DE PRODUTO', 'BUs', 'C.Custo', 'STATUS', 'perc']


@dataclass(frozen=True)
class ProjectRecord:
    """One row of the portfolio CSV export."""
    cliente: str = ''
    tipo_projeto: str = ''
    tipo_produto: str = ''
    bus: str = ''
    c_custo: str = ''
    status: str = ''
    perc: Optional[float] = None

    def to_dict(self):
        return {
            'CLIENTE': self.cliente,
            'TIPO DE PROJETO': self.tipo_projeto,
            'TIPO DE PRODUTO': self.tipo_produto,
            'BUs': self.bus,
            'C.Custo': self.c_custo,
            'STATUS': self.status,
            'perc': self.perc,
        }


def _to_number(value):
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except ValueError:
        return 0


def _parse_date(value):
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _format_date(value):
    return value.isoformat() if value else ''


@dataclass
class BuHours:
    infra: float = 0
    sse: float = 0
    ti: float = 0
    aut: float = 0

    @property
    def total(self):
        return self.infra + self.sse + self.ti + self.aut

    def items(self):
        return [('infra', self.infra), ('sse', self.sse), ('ti', self.ti), ('aut', self.aut)]

    def to_dict(self):
        return dict(self.items())

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            return cls()
        return cls(
            infra=_to_number(data.get('infra')),
            sse=_to_number(data.get('sse')),
            ti=_to_number(data.get('ti')),
            aut=_to_number(data.get('aut')),
        )


@dataclass
class Step:
    name: str
    perc: float = 0

    def to_dict(self):
        return {'name': self.name, 'perc': self.perc}

    @classmethod
    def from_dict(cls, data):
        return cls(name=str(data.get('name') or ''), perc=_to_number(data.get('perc')))


def default_steps() -> List[Step]:
    return [Step(name) for name in DEFAULT_STEP_NAMES]


@dataclass
class DetailedProject:
    """A monitored project: steps plus sold/used hours per business unit.

    ``id`` is None until the project is saved for the first time.
    """
    name: str = ''
    id: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    steps: List[Step] = field(default_factory=default_steps)
    sold_hours: BuHours = field(default_factory=BuHours)
    used_hours: BuHours = field(default_factory=BuHours)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'start': _format_date(self.start),
            'end': _format_date(self.end),
            'steps': [s.to_dict() for s in self.steps],
            'soldHours': self.sold_hours.to_dict(),
            'usedHours': self.used_hours.to_dict(),
        }

    @classmethod
    def from_dict(cls, data):
        raw_steps = data.get('steps') or []
        return cls(
            id=data.get('id'),
            name=str(data.get('name') or ''),
            start=_parse_date(data.get('start')),
            end=_parse_date(data.get('end')),
            steps=[Step.from_dict(s) for s in raw_steps if isinstance(s, dict)],
            sold_hours=BuHours.from_dict(data.get('soldHours')),
            used_hours=BuHours.from_dict(data.get('usedHours')),
        )


@dataclass
class KeyFact:
    id: str
    text: str
    logo_url: str = ''

    def to_dict(self):
        return {'id': self.id, 'text': self.text, 'logoUrl': self.logo_url}

    @classmethod
    def from_dict(cls, data):
        return cls(id=str(data.get('id') or ''), text=str(data.get('text') or ''), logo_url=str(data.get('logoUrl') or ''))


@dataclass
class NextStep:
    id: str
    project: str
    description: str

    def to_dict(self):
        return {'id': self.id, 'project': self.project, 'description': self.description}

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get('id') or ''),
            project=str(data.get('project') or ''),
            description=str(data.get('description') or ''),
        )
