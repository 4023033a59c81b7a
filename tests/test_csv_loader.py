import pytest

import csv_loader
from csv_loader import normalize_percent, normalize_status, parse_portfolio_csv, resolve_columns


@pytest.mark.parametrize("raw, expected", [
    ("45%", 45),
    ("45,5", 45.5),
    ("45.5", 45.5),
    (" 45 ", 45),
    ("120%", 120),
    ("-5", -5),
    (80, 80),
])
def test_normalize_percent_values(raw, expected):
    assert normalize_percent(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "abc%", "%", "   "])
def test_normalize_percent_unreadable_is_none(raw):
    assert normalize_percent(raw) is None


def test_normalize_status():
    assert normalize_status("  em andamento ") == "EM ANDAMENTO"
    assert normalize_status("não iniciado") == "NÃO INICIADO"
    assert normalize_status(None) == ""


def test_bom_and_junk_lines_before_header():
    text = "\ufeffRelatorio de projetos\n;;;\nCLIENTE;STATUS;%\r\nAcme;Finalizado OK;80%\n"
    result = parse_portfolio_csv(text)
    assert result.ok
    assert result.warning is None
    assert len(result.records) == 1
    record = result.records[0]
    assert record.cliente == "Acme"
    assert record.status == "FINALIZADO OK"
    assert record.perc == 80
    assert record.c_custo == ""
    assert record.bus == ""


def test_full_header_maps_every_column():
    text = (
        "cliente;Tipo de Projeto;TIPO DE PRODUTO;bus;C.CUSTO;Status;%\n"
        "Acme; Implantação ;Firewall;SEGURANÇA;CC-01; em andamento ;45,5%\n"
    )
    record = parse_portfolio_csv(text).records[0]
    assert record.to_dict() == {
        'CLIENTE': 'Acme',
        'TIPO DE PROJETO': 'Implantação',
        'TIPO DE PRODUTO': 'Firewall',
        'BUs': 'SEGURANÇA',
        'C.Custo': 'CC-01',
        'STATUS': 'EM ANDAMENTO',
        'perc': 45.5,
    }


def test_resolve_columns_first_match_wins():
    columns = resolve_columns(["CLIENTE", "STATUS", " status ", "Outro"])
    assert columns['cliente'] == 0
    assert columns['status'] == 1
    assert columns['perc'] == -1
    assert columns['c_custo'] == -1


def test_missing_header_is_fatal():
    result = parse_portfolio_csv("NOME;STATUS\nAcme;FINALIZADO\n")
    assert not result.ok
    assert result.records == []
    assert result.fatal == csv_loader.MSG_NO_HEADER


def test_header_only_is_fatal():
    result = parse_portfolio_csv("CLIENTE;STATUS\n;;\n\n")
    assert result.records == []
    assert result.fatal == csv_loader.MSG_TOO_FEW_LINES


def test_header_without_identity_columns_is_fatal():
    # "CLIENTES" satisfies the header search but is not the CLIENTE column
    result = parse_portfolio_csv("CLIENTES;STATUS;%\nAcme;FINALIZADO;10\n")
    assert result.records == []
    assert result.fatal == csv_loader.MSG_NO_IDENTITY_COLUMN


def test_rows_without_identity_are_skipped():
    text = "CLIENTE;C.Custo;STATUS\nAcme;;FINALIZADO\n;CC-9;EM ANDAMENTO\n ; ;PARALIZADO\n"
    records = parse_portfolio_csv(text).records
    assert [(r.cliente, r.c_custo) for r in records] == [("Acme", ""), ("", "CC-9")]


def test_zero_surviving_rows_is_a_warning():
    result = parse_portfolio_csv("CLIENTE;C.Custo;STATUS\n ; ;FINALIZADO\n")
    assert result.ok
    assert result.records == []
    assert result.warning == csv_loader.MSG_NO_ROWS


def test_short_rows_default_to_empty_cells():
    records = parse_portfolio_csv("CLIENTE;BUs;STATUS;%\nAcme\n").records
    assert records[0].bus == ""
    assert records[0].status == ""
    assert records[0].perc is None


def test_bytes_are_decoded_as_utf8():
    data = "CLIENTE;STATUS\nAcme;não iniciado\n".encode("utf-8-sig")
    record = parse_portfolio_csv(data).records[0]
    assert record.cliente == "Acme"
    assert record.status == "NÃO INICIADO"


def test_upload_key_changes_with_content_of_same_length():
    before = csv_loader.upload_key("export.csv", b"CLIENTE;%\nAcme;45%\n")
    after = csv_loader.upload_key("export.csv", b"CLIENTE;%\nAcme;50%\n")
    assert before != after
    assert before == csv_loader.upload_key("export.csv", "CLIENTE;%\nAcme;45%\n")
    assert before.startswith("export.csv:")
