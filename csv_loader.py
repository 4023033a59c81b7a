"""Parsing of the semicolon-separated portfolio export into ProjectRecord rows."""

import hashlib
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from models import ProjectRecord

logger = logging.getLogger(__name__)

SEPARATOR = ';'
HEADER_MARKER = 'CLIENTE'
BOM = '\ufeff'

# Field name -> header name in the export (matched case-insensitively)
COLUMN_HEADERS = {
    'cliente': 'CLIENTE',
    'tipo_projeto': 'TIPO DE PROJETO',
    'tipo_produto': 'TIPO DE PRODUTO',
    'bus': 'BUs',
    'c_custo': 'C.Custo',
    'status': 'STATUS',
    'perc': '%',
}

MSG_NO_HEADER = ("Erro de Análise: Não foi possível encontrar a linha de cabeçalho. "
                 "O arquivo CSV deve conter uma coluna 'CLIENTE'.")
MSG_TOO_FEW_LINES = "Erro de Análise: O arquivo CSV está vazio ou contém apenas a linha de cabeçalho."
MSG_NO_IDENTITY_COLUMN = ("Erro de Análise: O arquivo CSV deve conter uma coluna 'CLIENTE' ou 'C.Custo'. "
                          "Verifique se o cabeçalho está correto.")
MSG_NO_ROWS = ("Aviso: Nenhuma linha de projeto válida foi encontrada no arquivo CSV. "
               "Verifique o conteúdo e o formato do arquivo.")

_LEADING_NUMBER = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


class CsvParseError(Exception):
    """The export cannot be read at all (no header, no data, no identity column)."""


@dataclass
class CsvParseResult:
    records: List[ProjectRecord] = field(default_factory=list)
    fatal: Optional[str] = None
    warning: Optional[str] = None

    @property
    def ok(self):
        return self.fatal is None


def normalize_percent(value):
    """'45%' -> 45.0, '45,5' -> 45.5; empty or unreadable -> None. Not clamped."""
    if value is None:
        return None
    text = str(value).strip()
    if text.endswith('%'):
        text = text[:-1].strip()
    if not text:
        return None
    match = _LEADING_NUMBER.match(text.replace(',', '.', 1))
    if not match:
        return None
    return float(match.group(0))


def normalize_status(status):
    if not status:
        return ''
    return str(status).strip().upper()


def decode_upload(data):
    if isinstance(data, str):
        return data
    return data.decode('utf-8', errors='replace')


def upload_key(name, data):
    """Identity of an uploaded file: its name plus a digest of its bytes."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return f"{name}:{hashlib.sha1(data).hexdigest()[:12]}"


def _find_header_index(lines):
    for idx, line in enumerate(lines):
        if HEADER_MARKER in line.upper():
            return idx
    return -1


def resolve_columns(headers):
    """Map each known field to its header position, -1 when the column is absent."""
    lowered = [h.strip().lower() for h in headers]
    positions = {}
    for key, name in COLUMN_HEADERS.items():
        try:
            positions[key] = lowered.index(name.lower())
        except ValueError:
            positions[key] = -1
    return positions


def _usable_lines(text):
    if text.startswith(BOM):
        text = text[1:]
    all_lines = re.split(r'\r?\n', text)

    header_idx = _find_header_index(all_lines)
    if header_idx == -1:
        raise CsvParseError(MSG_NO_HEADER)

    lines = [l for l in all_lines[header_idx:] if l.replace(SEPARATOR, '').strip()]
    if len(lines) < 2:
        raise CsvParseError(MSG_TOO_FEW_LINES)
    return lines


def _read_records(text):
    lines = _usable_lines(text)
    columns = resolve_columns(lines[0].split(SEPARATOR))
    if columns['cliente'] == -1 and columns['c_custo'] == -1:
        raise CsvParseError(MSG_NO_IDENTITY_COLUMN)

    records = []
    for line_no, line in enumerate(lines[1:], start=2):
        cells = [c.strip() for c in line.split(SEPARATOR)]

        def cell(key):
            idx = columns[key]
            if idx < 0 or idx >= len(cells):
                return ''
            return cells[idx]

        cliente = cell('cliente')
        c_custo = cell('c_custo')
        if not cliente and not c_custo:
            logger.debug("Skipping line %d without CLIENTE and C.Custo", line_no)
            continue

        records.append(ProjectRecord(
            cliente=cliente,
            tipo_projeto=cell('tipo_projeto'),
            tipo_produto=cell('tipo_produto'),
            bus=cell('bus'),
            c_custo=c_custo,
            status=normalize_status(cell('status')),
            perc=normalize_percent(cell('perc')),
        ))
    return records


def parse_portfolio_csv(text):
    """Parse a raw export into a CsvParseResult.

    Fatal problems leave ``records`` empty and set ``fatal``; a readable file
    without any project row sets ``warning`` instead.
    """
    try:
        records = _read_records(decode_upload(text))
    except CsvParseError as e:
        logger.warning("CSV rejected: %s", e)
        return CsvParseResult(fatal=str(e))

    if not records:
        logger.warning("CSV parsed but no project rows survived")
        return CsvParseResult(warning=MSG_NO_ROWS)

    logger.info("Loaded %d project rows from CSV", len(records))
    return CsvParseResult(records=records)
