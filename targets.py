"""
Thresholds, palette and storage keys for the Teleinfo portfolio dashboard.
These values drive status/BU colouring, hours risk flags and the local documents.
"""

# Canonical statuses, checked in this order against the start of the status text
STATUS_FINISHED = 'FINALIZADO'
STATUS_IN_PROGRESS = 'EM ANDAMENTO'
STATUS_PARALYZED = 'PARALIZADO'
STATUS_NOT_STARTED = 'NÃO INICIADO'
STATUS_DEFAULT = 'DEFAULT'

STATUS_STYLES = {
    STATUS_FINISHED: {'pill': 'background-color: rgba(34,197,94,0.1); color: #4ade80', 'chart': '#22c55e'},
    STATUS_IN_PROGRESS: {'pill': 'background-color: rgba(59,130,246,0.1); color: #60a5fa', 'chart': '#3b82f6'},
    STATUS_PARALYZED: {'pill': 'background-color: rgba(239,68,68,0.1); color: #f87171', 'chart': '#ef4444'},
    STATUS_NOT_STARTED: {'pill': 'background-color: rgba(234,179,8,0.1); color: #facc15', 'chart': '#eab308'},
    STATUS_DEFAULT: {'pill': 'background-color: rgba(107,114,128,0.1); color: #9ca3af', 'chart': '#6b7280'},
}

# Business units, matched by substring. "TI" must stay after the longer names.
BU_COLOR_RULES = [
    ('INFRAESTRUTURA', '#f97316'),
    ('SEGURANÇA', '#10b981'),
    ('TI', '#0b5ed7'),
    ('AUTOMAÇÃO', '#6b7280'),
]
BU_FALLBACK_COLOR = '#8b949e'

# Label used when a record has no status / BU
MISSING_LABEL = 'N/A'

# Sold vs used hours
HOURS_AT_RISK_RATIO = 0.8
HOURS_SOLD_COLOR = '#10b981'
HOURS_RISK_COLORS = {
    'normal': '#f97316',
    'at_risk': '#eab308',
    'exceeded': '#ef4444',
}
BU_HOURS_LABELS = {
    'infra': 'Infra',
    'sse': 'Segurança',
    'ti': 'TI',
    'aut': 'Automação',
}

# Monitored project defaults
DEFAULT_STEP_NAMES = ['Planejamento', 'Execução', 'Entrega']
NEW_STEP_NAME = 'Nova Etapa'

# Local documents
DETAILED_PROJECTS_KEY = 'teleinfo_detailed_projects'
KEY_FACTS_KEY = 'teleinfo_keyfacts'
NEXT_STEPS_KEY = 'teleinfo_nextsteps'

# Brand palette
BRAND_BLUE = '#0B5ED7'
BRAND_GREEN = '#10B981'
BRAND_ORANGE = '#F97316'
