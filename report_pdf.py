from __future__ import annotations

import html
from datetime import date
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    PageBreak,
)

from targets import BRAND_BLUE, BRAND_GREEN, BRAND_ORANGE, HOURS_SOLD_COLOR
from timeline import get_timeline_info, overall_progress, hours_comparison_data

REPORT_FILENAME = "Relatorio_De_Status_Teleinfo.pdf"

_styles = getSampleStyleSheet()
TITLE = ParagraphStyle("SlideTitle", parent=_styles["Heading1"], fontSize=24, leading=28,
                       textColor=colors.HexColor(BRAND_BLUE), spaceAfter=14)
SUBTITLE = ParagraphStyle("SlideSubtitle", parent=_styles["Heading3"], textColor=colors.HexColor("#374151"))
BODY = ParagraphStyle("SlideBody", parent=_styles["BodyText"], fontSize=12, leading=16)
MUTED = ParagraphStyle("SlideMuted", parent=BODY, textColor=colors.HexColor("#6b7280"))
HIGHLIGHT = ParagraphStyle("SlideHighlight", parent=BODY, fontSize=18, leading=22,
                           textColor=colors.HexColor(BRAND_ORANGE), alignment=1, spaceAfter=6)


def _p(text, style=BODY):
    return Paragraph(html.escape(str(text)), style)


def _table(data, col_widths=None, extra_styles=None):
    t = Table(data, colWidths=col_widths, hAlign="LEFT", repeatRows=1)
    style = [
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BACKGROUND", (0, 0), (-1, 0), colors.whitesmoke),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, -1), 6),
        ("RIGHTPADDING", (0, 0), (-1, -1), 6),
    ]
    t.setStyle(TableStyle(style + (extra_styles or [])))
    return t


def _counts_table(title, chart_data):
    rows = [[title, "Projetos"]]
    tints = []
    for i, entry in enumerate(chart_data, start=1):
        rows.append([_p(entry["name"]), str(entry["Projetos"])])
        tints.append(("BACKGROUND", (1, i), (1, i), colors.HexColor(entry["color"])))
        tints.append(("TEXTCOLOR", (1, i), (1, i), colors.white))
    return _table(rows, [3.2 * inch, 1.0 * inch], tints)


def _progress_bar(progress, width=8.5 * inch):
    filled = max(0.01, min(1.0, progress / 100.0)) * width
    bar = Table([["", ""]], colWidths=[filled, max(0.01, width - filled)], rowHeights=[0.18 * inch])
    bar.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (0, 0), colors.HexColor(BRAND_BLUE)),
        ("BACKGROUND", (1, 0), (1, 0), colors.HexColor("#e5e7eb")),
    ]))
    return bar


def _cover_slide(today):
    return [
        Spacer(1, 0.4 * inch),
        _p("Escritório de Projetos", SUBTITLE),
        Spacer(1, 1.0 * inch),
        _p("Status Report", SUBTITLE),
        Paragraph(
            f'<font size="54" color="black">tel</font><font size="54" color="{BRAND_BLUE}">e</font>'
            f'<font size="54" color="black">info</font>',
            ParagraphStyle("Brand", parent=BODY, leading=60),
        ),
        _p("TECNOLOGIA INTEGRADA", MUTED),
        Spacer(1, 1.5 * inch),
        _p(today.strftime("%d/%m/%Y"), MUTED),
    ]


def _key_facts_slide(key_facts):
    story = [_p("Fatos Relevantes do Período", TITLE)]
    if not key_facts:
        return story + [_p("Nenhum fato relevante adicionado.", MUTED)]
    for fact in key_facts:
        story.append(Paragraph(f"&bull; {html.escape(fact.text)}", BODY))
        story.append(Spacer(1, 6))
    return story


def _summary_slide(kpis, monitored_count):
    metrics = [
        ["Projetos Totais", "Projetos Monitorados", "Média Conclusão", "Finalizados",
         "Em Andamento", "Paralisados", "Não Iniciados"],
        [str(kpis.get("total_projects", 0)), str(monitored_count), kpis.get("avg_percent_label", "0.0%"),
         str(kpis.get("finished_count", 0)), str(kpis.get("in_progress_count", 0)),
         str(kpis.get("paralyzed_count", 0)), str(kpis.get("not_started_count", 0))],
    ]
    return [
        _p("Visão Geral do Portfólio", TITLE),
        _table(metrics, [1.3 * inch] * 7, [("ALIGN", (0, 0), (-1, -1), "CENTER"),
                                           ("FONTSIZE", (0, 1), (-1, 1), 16)]),
        Spacer(1, 0.3 * inch),
        _p("Projetos por Status", SUBTITLE),
        _counts_table("Status", kpis.get("status_chart_data", [])),
        Spacer(1, 0.2 * inch),
        _p("Projetos por Unidade de Negócio", SUBTITLE),
        _counts_table("Unidade de Negócio", kpis.get("bu_chart_data", [])),
    ]


def _detailed_project_slide(project, today):
    info = get_timeline_info(project.start, project.end, today)
    start = project.start.isoformat() if project.start else "N/A"
    end = project.end.isoformat() if project.end else "N/A"

    steps = [["Etapa", "%"]] + [[_p(s.name), f"{s.perc:g}%"] for s in project.steps]
    hours_rows = [["BU", "Vendidas", "Utilizadas"]]
    tints = []
    for i, row in enumerate(hours_comparison_data(project), start=1):
        hours_rows.append([row["name"], f"{row['Vendidas']:g}", f"{row['Utilizadas']:g}"])
        tints.append(("BACKGROUND", (1, i), (1, i), colors.HexColor(HOURS_SOLD_COLOR)))
        tints.append(("BACKGROUND", (2, i), (2, i), colors.HexColor(row["color"])))

    return [
        _p(f"Projeto Detalhado: {project.name}", TITLE),
        _p(f"Início: {start}    Término: {end}", MUTED),
        Paragraph(f'<font color="{BRAND_BLUE}"><b>Progresso Total: {overall_progress(project.steps):.1f}%</b></font>', BODY),
        Spacer(1, 0.2 * inch),
        _p("Linha do Tempo", SUBTITLE),
        _p(info.text, HIGHLIGHT),
        _progress_bar(info.progress),
        Spacer(1, 0.3 * inch),
        _p("Progresso das Etapas", SUBTITLE),
        _table(steps, [4.0 * inch, 1.0 * inch]),
        Spacer(1, 0.2 * inch),
        _p("Horas Vendidas vs. Utilizadas", SUBTITLE),
        _table(hours_rows, [1.6 * inch, 1.2 * inch, 1.2 * inch], tints),
    ]


def _next_steps_slide(next_steps):
    story = [_p("Próximos Passos", TITLE)]
    if not next_steps:
        return story + [_p("Nenhum próximo passo adicionado.", MUTED)]
    for step in next_steps:
        story.append(Paragraph(f"<b>{html.escape(step.project)}</b>", BODY))
        story.append(_p(step.description, MUTED))
        story.append(Spacer(1, 8))
    return story


def build_slides(kpis, key_facts, detailed_projects, next_steps, today=None):
    """Flowables for each slide, in presentation order."""
    today = today or date.today()
    slides = [
        _cover_slide(today),
        _key_facts_slide(key_facts),
        _summary_slide(kpis, len(detailed_projects)),
    ]
    slides.extend(_detailed_project_slide(p, today) for p in detailed_projects)
    slides.append(_next_steps_slide(next_steps))
    return slides


def _draw_frame(canvas, doc):
    canvas.saveState()
    canvas.setFillColor(colors.HexColor(BRAND_GREEN))
    canvas.rect(0, 0, doc.pagesize[0], 0.12 * inch, stroke=0, fill=1)
    canvas.restoreState()


def build_status_report_pdf(kpis, key_facts, detailed_projects, next_steps, today=None) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(letter),
        leftMargin=0.6 * inch,
        rightMargin=0.6 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.5 * inch,
        title="Status Report",
    )
    story = []
    for i, slide in enumerate(build_slides(kpis, key_facts, detailed_projects, next_steps, today)):
        if i:
            story.append(PageBreak())
        story.extend(slide)
    doc.build(story, onFirstPage=_draw_frame, onLaterPages=_draw_frame)
    return buffer.getvalue()
