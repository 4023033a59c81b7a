import streamlit as st
import pandas as pd
import os
import copy
import logging
from datetime import date
from dotenv import load_dotenv
import openai
import plotly.express as px
import plotly.graph_objects as go
import csv_loader
import indicators # Portfolio aggregates
import storage
from classifier import status_badge_style
from models import DetailedProject, Step
from risk_analysis import DEFAULT_MODEL, generate_project_risk_analysis, generate_detailed_project_risk_analysis
from report_pdf import REPORT_FILENAME, build_status_report_pdf
from targets import BU_HOURS_LABELS, HOURS_SOLD_COLOR, NEW_STEP_NAME, BRAND_BLUE
from timeline import (
    get_timeline_info, overall_progress, hours_comparison_data, clamp_step_percent, sanitize_hours,
)

# Load environment variables
load_dotenv()

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Page Configuration ---
st.set_page_config(
    page_title="Painel IA da Teleinfo",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Global Styling ---
st.markdown("""
    <style>
        /* Metric card styling */
        .metric-card {
            background-color: #FFFFFF;
            border: 1px solid #e0e0e0;
            border-radius: 8px;
            padding: 16px;
            margin-bottom: 10px;
            box-shadow: 0 4px 6px rgba(0,0,0,0.04);
            transition: all 0.3s ease-in-out;
        }
        .metric-card:hover {
            box-shadow: 0 6px 12px rgba(0,0,0,0.08);
        }
        .metric-card-title {
            font-size: 0.8em;
            color: #4A5568;
            margin-bottom: 6px;
            font-weight: 500;
            text-transform: uppercase;
        }
        .metric-card-value {
            font-size: 1.6em;
            font-weight: 700;
            color: #1A202C;
        }
        .metric-card.blue { border-left: 5px solid #0B5ED7; }
        .metric-card.orange { border-left: 5px solid #F97316; }
        .metric-card.good { border-left: 5px solid #22c55e; }
        .metric-card.progress { border-left: 5px solid #3b82f6; }
        .metric-card.danger { border-left: 5px solid #ef4444; }
        .metric-card.warning { border-left: 5px solid #eab308; }

        /* Section headers */
        .section-header {
            font-size: 1.4em;
            font-weight: 600;
            color: #2D3748;
            margin-top: 20px;
            margin-bottom: 15px;
            border-bottom: 2px solid #CBD5E0;
            padding-bottom: 5px;
        }

        /* Slides */
        .slide-title {
            font-size: 1.9em;
            font-weight: 700;
            color: #0B5ED7;
            margin-bottom: 12px;
        }
        .slide-highlight {
            font-size: 1.5em;
            font-weight: 700;
            color: #F97316;
            text-align: center;
        }

        @media (max-width: 768px) {
            .metric-card { padding: 12px; margin-bottom: 8px; }
            .metric-card-value { font-size: 1.3em; }
            .section-header { font-size: 1.2em; margin-top: 15px; margin-bottom: 10px; }
        }
    </style>
""", unsafe_allow_html=True)

# --- Session State Initialization ---
def init_session_state():
    if 'projects' not in st.session_state:
        st.session_state.projects = []
    if 'file_name' not in st.session_state:
        st.session_state.file_name = ""
    if 'csv_file_key' not in st.session_state:
        st.session_state.csv_file_key = None
    if 'openai_client' not in st.session_state:
        try:
            st.session_state.openai_client = openai.OpenAI(api_key=get_env_var('OPENAI_API_KEY'))
        except Exception as e:
            logger.warning("OpenAI client not initialized: %s", e)
            st.session_state.openai_client = None
    if 'store' not in st.session_state:
        st.session_state.store = storage.JsonDocumentStore(get_env_var('PORTFOLIO_DATA_DIR', 'data'))
    if 'current_page' not in st.session_state:
        st.session_state.current_page = "📊 Painel"
    if 'risk_analysis' not in st.session_state:
        st.session_state.risk_analysis = None

    # Monitoring editor
    if 'monitor_selected_id' not in st.session_state:
        st.session_state.monitor_selected_id = "new"
    if 'monitor_loaded_id' not in st.session_state:
        st.session_state.monitor_loaded_id = None
    if 'monitor_form_version' not in st.session_state:
        st.session_state.monitor_form_version = 0
    if 'current_project' not in st.session_state:
        st.session_state.current_project = DetailedProject()

    # Presentation
    if 'slide_mode' not in st.session_state:
        st.session_state.slide_mode = False
    if 'slide_index' not in st.session_state:
        st.session_state.slide_index = 0

# --- Secret/Env Helper Functions ---
def get_env_var(key, default=None):
    try:
        if key in st.secrets:
            return st.secrets[key]
    except Exception:
        pass  # no secrets.toml
    return os.getenv(key, default)

def get_model_name():
    return get_env_var('OPENAI_MODEL', DEFAULT_MODEL)

# --- Data Loading and Processing ---
@st.cache_data(show_spinner=False)
def parse_uploaded_csv(data):
    return csv_loader.parse_portfolio_csv(data)

def handle_upload(uploaded):
    data = uploaded.getvalue()
    file_key = csv_loader.upload_key(uploaded.name, data)
    if st.session_state.csv_file_key == file_key:
        return
    result = parse_uploaded_csv(data)
    st.session_state.csv_file_key = file_key
    st.session_state.projects = result.records
    st.session_state.file_name = uploaded.name
    st.session_state.risk_analysis = None
    st.session_state.upload_message = (result.fatal, result.warning)
    for key in ("filter_status", "filter_bu", "filter_client", "risk_project_idx"):
        st.session_state.pop(key, None)

# --- Helper Functions for Display ---
def render_metric_card(title, value, card_class=""):
    st.markdown(f"""
        <div class="metric-card {card_class}">
            <div class="metric-card-title">{title}</div>
            <div class="metric-card-value">{value}</div>
        </div>
    """, unsafe_allow_html=True)

def render_summary_cards(kpis, monitored_count):
    cards = [
        ("Projetos Totais", kpis['total_projects'], "blue"),
        ("Projetos Monitorados", monitored_count, "orange"),
        ("Média de Conclusão", kpis['avg_percent_label'], "blue"),
        ("Finalizados", kpis['finished_count'], "good"),
        ("Em Andamento", kpis['in_progress_count'], "progress"),
        ("Paralisados", kpis['paralyzed_count'], "danger"),
        ("Não Iniciados", kpis['not_started_count'], "warning"),
    ]
    cols = st.columns(len(cards))
    for col, (title, value, card_class) in zip(cols, cards):
        with col:
            render_metric_card(title, value, card_class)

def count_bar_chart(chart_data, title):
    df = pd.DataFrame(chart_data, columns=['name', 'Projetos', 'color'])
    fig = px.bar(
        df, x='name', y='Projetos', color='name', title=title, text_auto=True,
        color_discrete_map={row['name']: row['color'] for row in chart_data},
    )
    fig.update_layout(showlegend=False, xaxis_title=None, height=340, margin=dict(l=10, r=10, t=50, b=10))
    return fig

def hours_bar_chart(project, height=320):
    rows = hours_comparison_data(project)
    fig = go.Figure()
    fig.add_bar(x=[r['name'] for r in rows], y=[r['Vendidas'] for r in rows], name="Horas Vendidas",
                marker_color=HOURS_SOLD_COLOR)
    fig.add_bar(x=[r['name'] for r in rows], y=[r['Utilizadas'] for r in rows], name="Horas Utilizadas",
                marker_color=[r['color'] for r in rows])
    fig.update_layout(barmode="group", height=height, margin=dict(l=10, r=10, t=10, b=10),
                      legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0))
    return fig

def project_label(record):
    return f"{record.cliente or record.c_custo} - {record.tipo_projeto or 'N/A'}"

# --- Page Rendering Functions ---
def render_dashboard_page():
    st.title("📊 Painel de Projetos")

    uploaded = st.file_uploader("Carregar CSV", type=["csv"], key="csv_upload")
    if uploaded is not None:
        handle_upload(uploaded)

    fatal, warning = st.session_state.get('upload_message', (None, None))
    if fatal: st.error(fatal)
    if warning: st.warning(warning)

    projects = st.session_state.projects
    if not projects:
        st.info("Bem-vindo ao Painel IA da Teleinfo. Carregue um arquivo CSV para começar.")
        return
    st.caption(f"Arquivo: {st.session_state.file_name}")

    options = indicators.get_filter_options(projects)
    fcols = st.columns(3)
    all_label = lambda v: v or "Todos"
    status_filter = fcols[0].selectbox("Status", [""] + options['statuses'], format_func=all_label, key="filter_status")
    bu_filter = fcols[1].selectbox("Unidade de Negócio", [""] + options['bus'], format_func=all_label, key="filter_bu")
    client_filter = fcols[2].selectbox("Cliente", [""] + options['clients'], format_func=all_label, key="filter_client")

    filtered = indicators.filter_projects(projects, status=status_filter, bu=bu_filter, client=client_filter)
    kpis = indicators.get_portfolio_kpis(filtered)
    monitored_count = len(storage.load_detailed_projects(st.session_state.store))

    render_summary_cards(kpis, monitored_count)

    chart_cols = st.columns(2)
    with chart_cols[0]:
        st.plotly_chart(count_bar_chart(kpis['status_chart_data'], "Projetos por Status"), use_container_width=True)
    with chart_cols[1]:
        st.plotly_chart(count_bar_chart(kpis['bu_chart_data'], "Projetos por Unidade de Negócio"), use_container_width=True)

    st.markdown("<div class='section-header'>Detalhes dos Projetos</div>", unsafe_allow_html=True)
    display_df = indicators.records_to_frame(filtered).rename(columns={
        'CLIENTE': 'Cliente', 'TIPO DE PROJETO': 'Tipo de Projeto', 'TIPO DE PRODUTO': 'Tipo de Produto',
        'BUs': 'UN', 'C.Custo': 'Centro de Custo', 'STATUS': 'Status', 'perc': '%',
    })
    st.dataframe(display_df.style.map(status_badge_style, subset=['Status']), use_container_width=True, height=400)

    render_project_risk_analysis(filtered)

def render_project_risk_analysis(filtered):
    st.markdown("<div class='section-header'>🧠 Análise de Risco IA</div>", unsafe_allow_html=True)
    if not filtered:
        st.info("Nenhum projeto na seleção atual.")
        return
    idx = st.selectbox("Projeto", range(len(filtered)), format_func=lambda i: project_label(filtered[i]), key="risk_project_idx")
    project = filtered[idx]
    if st.button("Gerar Análise de Risco com IA", key="risk_project_btn"):
        with st.spinner("Analisando..."):
            text = generate_project_risk_analysis(st.session_state.openai_client, project, get_model_name())
        st.session_state.risk_analysis = {"key": ("csv", project), "text": text}
    analysis = st.session_state.risk_analysis
    if analysis and analysis["key"] == ("csv", project):
        st.caption(f"Projeto: {project.cliente} - {project.tipo_projeto}")
        st.markdown(analysis["text"])

# --- Monitoring (detailed projects) ---
def _monitor_key(name):
    return f"monitor_{st.session_state.monitor_form_version}_{name}"

def _reset_monitor_form():
    st.session_state.monitor_form_version += 1

def _sync_current_project(projects_by_id):
    pending = st.session_state.pop('monitor_pending_select', None)
    if pending is not None:
        st.session_state.monitor_selected_id = pending
    selected = st.session_state.monitor_selected_id
    if selected != "new" and selected not in projects_by_id:
        selected = st.session_state.monitor_selected_id = "new"
    if st.session_state.monitor_loaded_id != selected:
        if selected == "new":
            st.session_state.current_project = DetailedProject()
        else:
            st.session_state.current_project = copy.deepcopy(projects_by_id[selected])
        st.session_state.monitor_loaded_id = selected
        _reset_monitor_form()

def render_monitoring_page():
    st.title("🗂️ Monitoramento de Projetos")
    store = st.session_state.store
    projects_by_id = {p.id: p for p in storage.load_detailed_projects(store)}
    _sync_current_project(projects_by_id)

    st.selectbox(
        "Projeto", ["new"] + list(projects_by_id),
        format_func=lambda pid: "(Novo Projeto)" if pid == "new" else projects_by_id[pid].name,
        key="monitor_selected_id",
    )
    project = st.session_state.current_project

    form_cols = st.columns(3)
    project.name = form_cols[0].text_input("Nome do Projeto", value=project.name, key=_monitor_key("name"))
    project.start = form_cols[1].date_input("Início", value=project.start, format="YYYY-MM-DD", key=_monitor_key("start"))
    project.end = form_cols[2].date_input("Término", value=project.end, format="YYYY-MM-DD", key=_monitor_key("end"))

    action_cols = st.columns([1, 1, 1, 4])
    if action_cols[0].button("💾 Salvar", key="monitor_save"):
        try:
            saved = storage.save_detailed_project(store, project)
        except ValueError as e:
            st.error(str(e))
        else:
            st.session_state.monitor_pending_select = saved.id
            st.session_state.monitor_loaded_id = saved.id
            st.session_state.monitor_flash = "Projeto salvo!"
            st.rerun()
    if action_cols[1].button("🆕 Novo", key="monitor_new"):
        st.session_state.monitor_pending_select = "new"
        st.rerun()
    analyze = action_cols[2].button("🧠 Analisar Risco", key="monitor_risk", disabled=project.id is None)
    flash = st.session_state.pop("monitor_flash", None)
    if flash:
        st.success(flash)

    if project.start and project.end:
        st.caption(f"De {project.start.isoformat()} até {project.end.isoformat()}")
    else:
        st.caption("Defina as datas de início e término")

    left, right = st.columns(2)
    with left:
        st.markdown("<div class='section-header'>Etapas</div>", unsafe_allow_html=True)
        remove_index = None
        for i, step in enumerate(project.steps):
            c1, c2, c3 = st.columns([4, 2, 1])
            step.name = c1.text_input(f"Etapa {i + 1}", value=step.name, key=_monitor_key(f"step_name_{i}"))
            step.perc = clamp_step_percent(c2.number_input(
                "%", min_value=0.0, max_value=100.0, value=float(clamp_step_percent(step.perc)), step=1.0, key=_monitor_key(f"step_perc_{i}")))
            if c3.button("🗑️", key=_monitor_key(f"step_remove_{i}")):
                remove_index = i
        if remove_index is not None:
            project.steps.pop(remove_index)
            _reset_monitor_form()
            st.rerun()
        if st.button("➕ Adicionar Etapa", key="monitor_add_step"):
            project.steps.append(Step(NEW_STEP_NAME))
            _reset_monitor_form()
            st.rerun()
        st.metric("Progresso Geral", f"{overall_progress(project.steps, named_only=True):.1f}%")

    with right:
        st.markdown("<div class='section-header'>Horas por BU</div>", unsafe_allow_html=True)
        for label, attr in (("Horas Vendidas", "sold_hours"), ("Horas Utilizadas", "used_hours")):
            st.write(f"**{label}**")
            hours = getattr(project, attr)
            hcols = st.columns(4)
            for col, (bu, value) in zip(hcols, hours.items()):
                new_value = col.number_input(BU_HOURS_LABELS[bu], min_value=0.0, value=float(sanitize_hours(value)), step=1.0,
                                             key=_monitor_key(f"{attr}_{bu}"))
                setattr(hours, bu, sanitize_hours(new_value))
        st.plotly_chart(hours_bar_chart(project), use_container_width=True)

    if analyze:
        with st.spinner("Analisando..."):
            text = generate_detailed_project_risk_analysis(st.session_state.openai_client, project, get_model_name())
        st.session_state.risk_analysis = {"key": ("detailed", project.id), "text": text}
    analysis = st.session_state.risk_analysis
    if analysis and analysis["key"] == ("detailed", project.id):
        st.markdown("<div class='section-header'>🧠 Análise de Risco IA (Detalhada)</div>", unsafe_allow_html=True)
        st.caption(f"Projeto: {project.name}")
        st.markdown(analysis["text"])

# --- Presentation ---
def render_cover_slide(today):
    st.markdown("#### Escritório de Projetos")
    st.markdown("### Status Report")
    st.markdown(
        f"<div style='font-size:5em;font-weight:800;letter-spacing:-0.05em'>tel<span style='color:{BRAND_BLUE}'>e</span>info</div>",
        unsafe_allow_html=True)
    st.caption("TECNOLOGIA INTEGRADA")
    st.write(today.strftime("%d/%m/%Y"))

def render_key_facts_slide(key_facts, editable):
    st.markdown("<div class='slide-title'>Fatos Relevantes do Período</div>", unsafe_allow_html=True)
    if not key_facts:
        st.caption("Nenhum fato relevante adicionado.")
    for fact in key_facts:
        cols = st.columns([1, 10, 1])
        if fact.logo_url:
            cols[0].image(fact.logo_url, width=40)
        cols[1].write(fact.text)
        if editable and cols[2].button("🗑️", key=f"remove_fact_{fact.id}"):
            storage.remove_key_fact(st.session_state.store, fact.id)
            st.rerun()
    if editable:
        with st.form("add_key_fact", clear_on_submit=True):
            st.write("**Adicionar Fato Relevante**")
            text = st.text_input("Descrição do fato")
            logo = st.text_input("URL do logo (opcional)")
            if st.form_submit_button("➕ Adicionar"):
                if storage.add_key_fact(st.session_state.store, text, logo):
                    st.rerun()

def render_summary_slide(kpis, monitored_count):
    st.markdown("<div class='slide-title'>Visão Geral do Portfólio</div>", unsafe_allow_html=True)
    render_summary_cards(kpis, monitored_count)
    cols = st.columns(2)
    with cols[0]:
        st.plotly_chart(count_bar_chart(kpis['status_chart_data'], "Projetos por Status"), use_container_width=True)
    with cols[1]:
        st.plotly_chart(count_bar_chart(kpis['bu_chart_data'], "Projetos por Unidade de Negócio"), use_container_width=True)

def render_detailed_project_slide(project, today):
    info = get_timeline_info(project.start, project.end, today)
    st.markdown(f"<div class='slide-title'>Projeto Detalhado: {project.name}</div>", unsafe_allow_html=True)
    cols = st.columns(2)
    cols[0].write(f"Início: {project.start.isoformat() if project.start else 'N/A'}")
    cols[0].write(f"**Progresso Total: {overall_progress(project.steps):.1f}%**")
    cols[1].write(f"Término: {project.end.isoformat() if project.end else 'N/A'}")
    st.markdown("<h4 style='text-align:center'>Linha do Tempo</h4>", unsafe_allow_html=True)
    st.markdown(f"<div class='slide-highlight'>{info.text}</div>", unsafe_allow_html=True)
    st.progress(int(round(info.progress)))
    left, right = st.columns(2)
    with left:
        st.write("**Progresso das Etapas**")
        for step in project.steps:
            st.progress(int(round(clamp_step_percent(step.perc))), text=f"{step.name}: {step.perc:g}%")
    with right:
        st.write("**Horas Vendidas vs. Utilizadas**")
        st.plotly_chart(hours_bar_chart(project, height=260), use_container_width=True, key=f"hours_{project.id}")

def render_next_steps_slide(next_steps, editable):
    st.markdown("<div class='slide-title'>Próximos Passos</div>", unsafe_allow_html=True)
    if not next_steps:
        st.caption("Nenhum próximo passo adicionado.")
    for step in next_steps:
        cols = st.columns([11, 1])
        cols[0].markdown(f"**{step.project}**  \n{step.description}")
        if editable and cols[1].button("🗑️", key=f"remove_step_{step.id}"):
            storage.remove_next_step(st.session_state.store, step.id)
            st.rerun()
    if editable:
        with st.form("add_next_step", clear_on_submit=True):
            st.write("**Adicionar Próximo Passo**")
            project_name = st.text_input("Nome do Projeto")
            description = st.text_area("Descrição da ação/entrega", height=80)
            if st.form_submit_button("➕ Adicionar"):
                if storage.add_next_step(st.session_state.store, project_name, description):
                    st.rerun()

def render_presentation_page():
    st.title("🖥️ Apresentação")
    store = st.session_state.store
    today = date.today()
    key_facts = storage.load_key_facts(store)
    next_steps = storage.load_next_steps(store)
    detailed_projects = storage.load_detailed_projects(store)
    kpis = indicators.get_portfolio_kpis(st.session_state.projects)
    editable = not st.session_state.slide_mode

    slides = [
        lambda: render_cover_slide(today),
        lambda: render_key_facts_slide(key_facts, editable),
        lambda: render_summary_slide(kpis, len(detailed_projects)),
    ]
    slides += [lambda p=p: render_detailed_project_slide(p, today) for p in detailed_projects]
    slides.append(lambda: render_next_steps_slide(next_steps, editable))

    top = st.columns([1, 1, 4])
    if st.session_state.slide_mode:
        if top[0].button("✖️ Sair do Modo Apresentação"):
            st.session_state.slide_mode = False
            st.rerun()
    elif top[0].button("▶️ Modo Apresentação"):
        st.session_state.slide_mode = True
        st.session_state.slide_index = 0
        st.rerun()
    if top[1].button("📄 Gerar PDF"):
        with st.spinner("Gerando PDF..."):
            st.session_state.report_pdf = build_status_report_pdf(kpis, key_facts, detailed_projects, next_steps, today)
    if st.session_state.get('report_pdf'):
        top[2].download_button(
            "⬇️ Baixar PDF",
            data=st.session_state.report_pdf,
            file_name=REPORT_FILENAME,
            mime="application/pdf",
        )

    if st.session_state.slide_mode:
        idx = max(0, min(st.session_state.slide_index, len(slides) - 1))
        with st.container(border=True):
            slides[idx]()
        nav = st.columns([1, 4, 1])
        if nav[0].button("⬅️ Anterior", disabled=idx == 0):
            st.session_state.slide_index = max(idx - 1, 0)
            st.rerun()
        nav[1].markdown(f"<p style='text-align:center'>{idx + 1} / {len(slides)}</p>", unsafe_allow_html=True)
        if nav[2].button("Próximo ➡️", disabled=idx == len(slides) - 1):
            st.session_state.slide_index = min(idx + 1, len(slides) - 1)
            st.rerun()
    else:
        for render_slide in slides:
            with st.container(border=True):
                render_slide()

PAGES = {
    "📊 Painel": render_dashboard_page,
    "🗂️ Monitoramento": render_monitoring_page,
    "🖥️ Apresentação": render_presentation_page,
}

def main():
    init_session_state()

    st.sidebar.title("Painel IA da Teleinfo")
    st.sidebar.markdown("---")

    st.sidebar.subheader("Navegação")

    current_page_key_index = list(PAGES.keys()).index(st.session_state.current_page) if st.session_state.current_page in PAGES else 0

    st.session_state.current_page = st.sidebar.radio(
        "Ir para", list(PAGES.keys()), index=current_page_key_index, key="navigation_radio"
    )
    st.sidebar.markdown("---")
    if not st.session_state.openai_client:
        st.sidebar.warning("Cliente OpenAI não configurado. A análise de risco IA retornará uma mensagem de erro.")

    page_function = PAGES.get(st.session_state.current_page)
    if page_function: page_function()
    else: st.error("Página não encontrada."); render_dashboard_page()

if __name__ == "__main__":
    main()
