import logging

from targets import BU_HOURS_LABELS
from timeline import overall_progress, hours_totals

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
PROJECT_FALLBACK = "Erro ao gerar a análise de risco."
DETAILED_FALLBACK = "Erro ao gerar a análise de risco detalhada."

SYSTEM_PROMPT = ("Você é um gerente de projetos sênior em uma integradora de tecnologia. "
                 "Responda em português, de forma concisa, em Markdown.")


def build_project_risk_prompt(project):
    progress = "N/A" if project.perc is None else f"{project.perc:g}"
    return f"""
Analise o projeto a seguir, identifique riscos potenciais e sugira uma estratégia de mitigação para cada um.
Seja conciso e liste até 3 pontos em formato Markdown.
Cada ponto deve estar no formato: "**Risco:** [descrição] - **Mitigação:** [sugestão]".

Detalhes do Projeto:
- Cliente: {project.cliente}
- Tipo de Projeto: {project.tipo_projeto}
- Status: {project.status}
- Progresso: {progress}%
"""


def _hours_lines(hours):
    return "\n".join(f"- {BU_HOURS_LABELS[bu]}: {value:g}h" for bu, value in hours.items())


def build_detailed_risk_prompt(project):
    total_sold, total_used = hours_totals(project)
    start = project.start.isoformat() if project.start else "N/A"
    end = project.end.isoformat() if project.end else "N/A"
    return f"""
Analise o projeto a seguir, identifique riscos potenciais e sugira uma estratégia de mitigação para cada um.
Foque especialmente na comparação entre horas vendidas e utilizadas, e o progresso geral.
Seja conciso e liste até 4 pontos em formato Markdown.
Cada ponto deve estar no formato: "**Risco:** [descrição] - **Mitigação:** [sugestão]".

Detalhes do Projeto:
- Nome: {project.name}
- Datas: de {start} a {end}
- Progresso Geral: {overall_progress(project.steps):.1f}%

Horas Vendidas (Total: {total_sold:g}):
{_hours_lines(project.sold_hours)}

Horas Utilizadas (Total: {total_used:g}):
{_hours_lines(project.used_hours)}
"""


def _complete(openai_client, prompt, model, fallback):
    if not openai_client:
        logger.warning("OpenAI client not configured; returning fallback risk analysis.")
        return fallback
    try:
        response = openai_client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            temperature=0.3,
            max_tokens=600
        )
        text = response.choices[0].message.content
    except Exception:
        logger.exception("Error generating risk analysis")
        return fallback
    if not text:
        logger.warning("Empty risk analysis returned by the model.")
        return fallback
    return text


def generate_project_risk_analysis(openai_client, project, model=DEFAULT_MODEL):
    """Risk analysis for one CSV project. Never raises; failures give PROJECT_FALLBACK."""
    return _complete(openai_client, build_project_risk_prompt(project), model, PROJECT_FALLBACK)


def generate_detailed_project_risk_analysis(openai_client, project, model=DEFAULT_MODEL):
    return _complete(openai_client, build_detailed_risk_prompt(project), model, DETAILED_FALLBACK)
